"""mapsketch CLI.

Command-line interface for replaying recorded drawing sessions against the
constraint engine and rendering exported feature collections.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from mapsketch import __version__
from mapsketch.config import settings
from mapsketch.drawing.events import EventScript
from mapsketch.drawing.events import replay as replay_events
from mapsketch.drawing.machine import DrawingStateMachine
from mapsketch.drawing.outcomes import Committed, Outcome
from mapsketch.export.geojson import export_geojson, load_feature_collection
from mapsketch.store.features import FeatureStore
from mapsketch.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="mapsketch",
    help="mapsketch: draw non-overlapping map features",
    add_completion=False,
)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"mapsketch {__version__}")


@app.command()
def limits(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the configured capacity limits per feature type."""
    values = settings.capacity_limits().model_dump()
    if json_output:
        typer.echo(json.dumps(values, indent=2))
    else:
        for feature_type, maximum in values.items():
            typer.echo(f"{feature_type}: {maximum}")


@app.command()
def replay(
    script_path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to a JSON event script",
        ),
    ],
    seed: Annotated[
        Path | None,
        typer.Option(
            "--seed",
            "-s",
            exists=True,
            dir_okay=False,
            help="GeoJSON FeatureCollection to start from",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the resulting collection as GeoJSON"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Replay a recorded drawing session and report commits and rejections."""
    _configure_logging(verbose)
    logger = get_logger(__name__)

    logger.info("Starting replay", script=str(script_path))

    try:
        script = EventScript.from_file(script_path)

        store = FeatureStore()
        if seed is not None:
            for feature in load_feature_collection(seed.read_text(encoding="utf-8")):
                store.add(feature)
            logger.info("Store seeded", path=str(seed), features=len(store))

        machine = DrawingStateMachine(
            store,
            min_trim_area=settings.MIN_TRIM_AREA,
            circle_steps=settings.CIRCLE_STEPS,
        )
        outcomes = replay_events(machine, script.events)

        if output is not None:
            output.write_text(
                export_geojson(store.features, indent=settings.EXPORT_INDENT),
                encoding="utf-8",
            )
            logger.info("Collection saved", path=str(output))

        if json_output:
            typer.echo(
                json.dumps(
                    {
                        "outcomes": [_outcome_to_dict(o) for o in outcomes],
                        "feature_count": len(store),
                    },
                    indent=2,
                )
            )
        else:
            for outcome in outcomes:
                typer.echo(_describe_outcome(outcome))
            typer.echo(f"Features: {len(store)}")

    except Exception as e:
        logger.exception("Replay failed")
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def render(
    geojson_path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Exported GeoJSON FeatureCollection",
        ),
    ],
    output: Annotated[Path, typer.Option("--output", "-o", help="Output PNG path")],
    width: Annotated[int, typer.Option("--width", help="Image width in pixels")] = 800,
    height: Annotated[
        int, typer.Option("--height", help="Image height in pixels")
    ] = 600,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Render an exported collection to a PNG preview."""
    from mapsketch.render.preview import PreviewRenderer  # noqa: PLC0415
    from mapsketch.render.snapshot import build_snapshot  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        features = load_feature_collection(geojson_path.read_text(encoding="utf-8"))
        image = PreviewRenderer().render(build_snapshot(features), size=(width, height))
        image.save(output, format="PNG")
        logger.info("Preview saved", path=str(output), features=len(features))

        if json_output:
            typer.echo(json.dumps({"png_path": str(output), "features": len(features)}))
        else:
            typer.echo(f"Preview saved to {output}")

    except Exception as e:
        logger.exception("Render failed")
        if json_output:
            typer.echo(json.dumps({"error": str(e)}))
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """mapsketch: draw non-overlapping map features."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _outcome_to_dict(outcome: Outcome) -> dict[str, Any]:
    if isinstance(outcome, Committed):
        return {
            "status": "committed",
            "feature_id": outcome.feature.id,
            "type": outcome.feature.type.value,
            "trimmed": outcome.trimmed,
        }
    return {
        "status": "rejected",
        "type": outcome.feature_type.value,
        "reason": outcome.reason.value,
        "message": outcome.message,
    }


def _describe_outcome(outcome: Outcome) -> str:
    if isinstance(outcome, Committed):
        suffix = " (trimmed)" if outcome.trimmed else ""
        return f"Committed {outcome.feature.type.value} {outcome.feature.id}{suffix}"
    return f"Rejected {outcome.feature_type.value}: {outcome.message}"
