from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from InquirerPy import inquirer

from experiments.group_means import run_group_means
from experiments.plots import (
    PlotSaveConfig,
    build_coefficient_paths_figure,
    build_cv_curve_figure,
    build_group_means_figure,
    plot_coefficient_paths,
    plot_cv_curve,
    plot_group_means,
)
from experiments.post import Section, render_post
from experiments.regularized_tidy import run_regularized_tidy
from src.datahub import get_spec, list_available_datasets
from src.datahub.config import DEFAULT_POST_PATH
from src.metrics.summary import SummaryConfig
from src.metrics.summary_policy import get_policy
from src.regression import RegularizationPathConfig

app = typer.Typer()


def _choose_dataset(dataset: Optional[str]) -> str:
    """Return ``dataset`` or ask for one interactively."""
    if dataset:
        return dataset
    return inquirer.select(
        message="Dataset:",
        choices=list(list_available_datasets()),
    ).execute()


def _save_config(
    plots_root: Optional[Path],
    plots_tag: Optional[str],
    demo: str,
    dataset: str,
    save_static: bool,
    save_html: bool,
) -> Optional[PlotSaveConfig]:
    if not plots_root:
        return None
    tag = plots_tag or datetime.utcnow().strftime("%Y%m%d-%H%M%S")
    base_dir = plots_root / demo / dataset
    print(f"[plots] Saving figures under {base_dir / tag}")
    return PlotSaveConfig(base_dir=base_dir, run_tag=tag, save_static=save_static, save_html=save_html)


@app.command("datasets")
def datasets() -> None:
    """
    List the bundled datasets and their default demo columns.
    """
    for key in list_available_datasets():
        spec = get_spec(key)
        demo = spec.demo
        print(f"{key:<12} {spec.description}")
        print(f"{'':<12} summary: {demo['value']} by {demo['x']} × {demo['group']}")
        if spec.regression_target:
            print(f"{'':<12} regression: {spec.regression_target} ~ {' + '.join(spec.regression_features)}")


@app.command("group-means")
def group_means(
    dataset: Optional[str] = typer.Option(None, "--dataset", help="Bundled dataset key (prompted when omitted)."),
    x: Optional[str] = typer.Option(None, "--x", help="First grouping column (x axis)."),
    group: Optional[str] = typer.Option(None, "--group", help="Second grouping column (one line per level)."),
    value: Optional[str] = typer.Option(None, "--value", help="Numeric measurement column."),
    z: float = typer.Option(1.96, "--z", help="Standard-error multiplier for normal intervals."),
    interval: str = typer.Option("normal", "--interval", help="Interval kind: normal or student."),
    confidence: float = typer.Option(0.95, "--confidence", help="Confidence level for student intervals."),
    single_policy: str = typer.Option(
        "zero",
        "--single-policy",
        help="Single-observation groups: zero (zero-width interval) or raise.",
        show_default=True,
    ),
    dropna: bool = typer.Option(False, "--dropna", help="Drop rows with missing values before summarizing."),
    x_label: Optional[str] = typer.Option(None, "--x-label", help="X axis title (defaults to the column name)."),
    legend_title: Optional[str] = typer.Option(None, "--legend-title", help="Legend title for the group lines."),
    title: Optional[str] = typer.Option(None, "--title", help="Figure title."),
    dodge: float = typer.Option(0.1, "--dodge", help="Horizontal offset between group lines."),
    plots: bool = typer.Option(True, "--plots/--no-plots", help="Render the figure."),
    plots_root: Optional[Path] = typer.Option(
        None,
        "--plots-root",
        help="Directory where plots should be saved (subfolders are created automatically).",
    ),
    plots_tag: Optional[str] = typer.Option(
        None,
        "--plots-tag",
        help="Folder suffix for this run (defaults to timestamp).",
    ),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
) -> None:
    """
    Summarize a measurement by two grouping columns and plot means with error bars.
    """
    dataset = _choose_dataset(dataset)
    try:
        config = SummaryConfig(
            z=z,
            interval=interval,  # type: ignore[arg-type]
            confidence=confidence,
            single_policy=get_policy(single_policy),
            dropna=dropna,
        )
        config.validate()
        spec = get_spec(dataset)
        _, frame = run_group_means(dataset, x=x, group=group, value=value, config=config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    print(frame.to_string(index=False))

    if not plots:
        return
    save_config = _save_config(plots_root, plots_tag, "group_means", dataset, save_static, save_html)
    plot_group_means(
        frame,
        x_label=x_label or x or spec.demo["x"],
        group_label=legend_title or group or spec.demo["group"],
        value_label=value or spec.demo["value"],
        title=title,
        dodge=dodge,
        save_to=save_config.for_plot("group_means") if save_config else None,
    )


@app.command("regularized")
def regularized(
    dataset: Optional[str] = typer.Option(None, "--dataset", help="Bundled dataset key (prompted when omitted)."),
    target: Optional[str] = typer.Option(None, "--target", help="Response column."),
    feature: List[str] = typer.Option([], "--feature", help="Feature column (repeatable; defaults per dataset)."),
    l1_ratio: float = typer.Option(1.0, "--l1-ratio", help="Elastic-net mixing: 1 = lasso, 0 = ridge."),
    n_lambdas: int = typer.Option(100, "--n-lambdas", help="Length of the lambda grid."),
    folds: int = typer.Option(10, "--folds", help="Cross-validation folds."),
    seed: int = typer.Option(42, "--seed", help="Random seed for fold assignment and tuning."),
    tune_l1: bool = typer.Option(False, "--tune-l1", help="Search l1_ratio with Optuna before the final fit."),
    trials: int = typer.Option(20, "--trials", help="Number of Optuna trials when --tune-l1 is set."),
    plots: bool = typer.Option(True, "--plots/--no-plots", help="Render the figures."),
    plots_root: Optional[Path] = typer.Option(
        None,
        "--plots-root",
        help="Directory where plots should be saved (subfolders are created automatically).",
    ),
    plots_tag: Optional[str] = typer.Option(
        None,
        "--plots-tag",
        help="Folder suffix for this run (defaults to timestamp).",
    ),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
) -> None:
    """
    Fit and cross-validate an elastic-net path, then print and plot its tidy summaries.
    """
    dataset = _choose_dataset(dataset)
    try:
        config = RegularizationPathConfig(l1_ratio=l1_ratio, n_lambdas=n_lambdas)
        config.validate()
        result = run_regularized_tidy(
            dataset,
            target=target,
            features=feature or None,
            config=config,
            folds=folds,
            seed=seed,
            tune=tune_l1,
            trials=trials,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    print(result.glance.to_string(index=False))
    print(result.glance_cv.to_string(index=False))
    print(result.coefficients.to_string(index=False))
    print(result.fitted_table().to_string(index=False))

    if not plots:
        return
    save_config = _save_config(plots_root, plots_tag, "regularized", dataset, save_static, save_html)
    plot_coefficient_paths(
        result.tidy,
        result.glance_cv,
        title=f"{dataset} – coefficient paths",
        save_to=save_config.for_plot("coefficient_paths") if save_config else None,
    )
    plot_cv_curve(
        result.tidy_cv,
        result.glance_cv,
        title=f"{dataset} – {result.cv.folds}-fold cross-validation",
        save_to=save_config.for_plot("cv_curve") if save_config else None,
    )


@app.command("post")
def post(
    output: Path = typer.Option(DEFAULT_POST_PATH, "--output", help="Where to write the HTML post."),
    summary_dataset: str = typer.Option("toothgrowth", "--summary-dataset", help="Dataset for the group-means demo."),
    regression_dataset: str = typer.Option("mtcars", "--regression-dataset", help="Dataset for the regression demo."),
    folds: int = typer.Option(10, "--folds", help="Cross-validation folds."),
    seed: int = typer.Option(42, "--seed", help="Random seed for fold assignment."),
) -> None:
    """
    Run both demos with their defaults and render them as one HTML article.
    """
    try:
        spec = get_spec(summary_dataset)
        _, summary = run_group_means(summary_dataset)
        result = run_regularized_tidy(regression_dataset, folds=folds, seed=seed)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    demo = spec.demo
    sections = [
        Section(
            heading="Means and error bars",
            paragraphs=[
                f"Mean {demo['value']} for each {demo['x']} level, one line per {demo['group']}. "
                "Error bars span mean ± 1.96 standard errors.",
            ],
            tables=[summary],
            figures=[
                build_group_means_figure(
                    summary,
                    x_label=demo["x"],
                    group_label=demo["group"],
                    value_label=demo["value"],
                )
            ],
        ),
        Section(
            heading="Lasso with tidy output",
            paragraphs=[
                "The fitted path, its cross-validation curve, the coefficients at lambda.1se "
                "and the fitted values with residuals, each as a plain data frame.",
            ],
            tables=[result.glance, result.glance_cv, result.coefficients, result.fitted_table()],
            figures=[
                build_coefficient_paths_figure(result.tidy, result.glance_cv),
                build_cv_curve_figure(result.tidy_cv, result.glance_cv),
            ],
        ),
    ]
    render_post(sections, output, title="Group means and tidy regularized regression")


if __name__ == "__main__":
    app()
