"""CLI commands for census-join."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click

from census_join import (
    AcsQuery,
    AcsType,
    DataUnavailable,
    Geoid,
    GeoidError,
    GeoLevel,
    JoinResponse,
    LodesDataset,
    LodesEdition,
    LodesJobType,
    LodesKind,
    NumericAggregation,
    OdPart,
    WorkplaceSegment,
    locate,
    normalize_state,
    run_acs_tiger,
    run_lodes_tiger,
)
from census_join.lodes import LATEST_YEAR

LEVEL_CHOICES = [level.value for level in GeoLevel]


@click.group()
@click.version_option(package_name="census-join")
@click.option("--verbose", is_flag=True, help="Log download and join progress")
def cli(verbose: bool):
    """Census-join: join Census statistics with TIGER/Line boundaries."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_geoid(value: str) -> Geoid:
    try:
        return Geoid.parse(value)
    except GeoidError as e:
        raise click.BadParameter(str(e)) from e


def _parse_region(value: str) -> Geoid:
    """Accept a GEOID or a state name/abbreviation."""
    if value.isdigit():
        return _parse_geoid(value)
    try:
        return Geoid.parse(normalize_state(value))
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@cli.command("geoid")
@click.argument("value")
def geoid_command(value: str):
    """Describe a GEOID: level, components, parent and ancestors."""
    geoid = _parse_geoid(value)
    parent = geoid.parent()

    components = {
        ct.value: ct.encode(v) for ct, v in zip(geoid.level.component_types, geoid.components)
    }
    info = {
        "geoid": str(geoid),
        "level": geoid.level.value,
        "components": components,
        "parent": str(parent) if parent is not None else None,
        "ancestors": {level.value: str(geoid.truncate_to(level)) for level in geoid.level.ancestors},
    }
    click.echo(json.dumps(info, indent=2))


def _write_output(response: JoinResponse, output: str) -> None:
    output_path = Path(output)
    if output_path.suffix == ".parquet":
        response.to_geodataframe().to_parquet(output_path)
    elif output_path.suffix == ".geojson":
        response.to_geodataframe().to_file(output_path, driver="GeoJSON")
    else:
        response.to_dataframe().to_csv(output_path, index=False)


def _report(response: JoinResponse, source: str) -> None:
    click.echo(response.summary())
    sections = [
        (f"{source} ERRORS", response.source_errors),
        ("TIGER ERRORS", response.tiger_errors),
        ("JOIN ERRORS", response.join_errors),
    ]
    for title, errors in sections:
        if errors:
            click.echo(title, err=True)
            for error in errors:
                click.echo(f"  {error}", err=True)


@cli.command()
@click.option("--geoid", "-g", help="Containing region, e.g. 08 for Colorado")
@click.option("--wildcard", "-w", type=click.Choice(LEVEL_CHOICES), help="Level of returned rows")
@click.option("--year", required=True, type=int, help="ACS year")
@click.option("--acs-query", "-q", required=True, help="Comma-separated variables")
@click.option(
    "--acs-type",
    "-a",
    default=AcsType.FIVE_YEAR.value,
    type=click.Choice([t.value for t in AcsType]),
)
@click.option("--acs-token", "-t", envvar="CENSUS_API_KEY", help="Census Data API key")
@click.option("--output", "-o", default="output.csv", type=click.Path(), help="Output file")
def acs(
    geoid: Optional[str],
    wildcard: Optional[str],
    year: int,
    acs_query: str,
    acs_type: str,
    acs_token: Optional[str],
    output: str,
):
    """Join ACS estimates with TIGER/Line geometries."""
    try:
        query = AcsQuery(
            year=year,
            acs_type=AcsType(acs_type),
            get=tuple(v.strip() for v in acs_query.split(",") if v.strip()),
            geoid=_parse_geoid(geoid) if geoid else None,
            wildcard=GeoLevel(wildcard) if wildcard else None,
            token=acs_token,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        response = asyncio.run(run_acs_tiger(query))
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    _report(response, "ACS")
    _write_output(response, output)
    click.echo(f"Wrote {len(response.join_dataset)} rows -> {output}")


def _lodes_options(f):
    options = [
        click.option(
            "--kind", default=LodesKind.WAC.value, type=click.Choice([k.value for k in LodesKind])
        ),
        click.option("--year", default=LATEST_YEAR, type=int, show_default=True),
        click.option(
            "--edition",
            default=LodesEdition.LODES8.value,
            type=click.Choice([e.value for e in LodesEdition]),
        ),
        click.option(
            "--job-type",
            default=LodesJobType.JT00.value,
            type=click.Choice([j.value for j in LodesJobType]),
        ),
        click.option(
            "--segment",
            default=WorkplaceSegment.S000.value,
            type=click.Choice([s.value for s in WorkplaceSegment]),
            help="Worker segment (RAC/WAC)",
        ),
        click.option(
            "--od-part",
            default=OdPart.MAIN.value,
            type=click.Choice([p.value for p in OdPart]),
            help="File part (OD)",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_dataset(
    kind: str, year: int, edition: str, job_type: str, segment: str, od_part: str
) -> LodesDataset:
    lodes_kind = LodesKind(kind)
    common = dict(year=year, job_type=LodesJobType(job_type), edition=LodesEdition(edition))
    if lodes_kind is LodesKind.OD:
        return LodesDataset.od(od_part=OdPart(od_part), **common)
    if lodes_kind is LodesKind.RAC:
        return LodesDataset.rac(segment=WorkplaceSegment(segment), **common)
    return LodesDataset.wac(segment=WorkplaceSegment(segment), **common)


@cli.command("lodes-uri")
@click.argument("region")
@_lodes_options
def lodes_uri(region: str, kind, year, edition, job_type, segment, od_part):
    """Print the LODES file URI for the state containing REGION."""
    dataset = _build_dataset(kind, year, edition, job_type, segment, od_part)
    try:
        click.echo(locate(dataset, _parse_region(region)))
    except DataUnavailable as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option(
    "--geoid", "-g", "regions", multiple=True, required=True, help="Region(s) of interest"
)
@click.option("--wildcard", "-w", type=click.Choice(LEVEL_CHOICES), help="Output level")
@click.option(
    "--aggregation",
    default=NumericAggregation.SUM.value,
    type=click.Choice([a.value for a in NumericAggregation]),
)
@click.option("--column", "-c", "columns", multiple=True, help="LODES measure(s) to keep")
@click.option("--output", "-o", type=click.Path(), help="Output file")
@_lodes_options
def lodes(
    regions: tuple[str, ...],
    wildcard: Optional[str],
    aggregation: str,
    columns: tuple[str, ...],
    output: Optional[str],
    kind,
    year,
    edition,
    job_type,
    segment,
    od_part,
):
    """Join LODES job counts with TIGER/Line geometries."""
    dataset = _build_dataset(kind, year, edition, job_type, segment, od_part)
    level = GeoLevel(wildcard) if wildcard else None
    geoids = [_parse_region(r) for r in regions]

    click.echo(dataset.description())
    try:
        response = asyncio.run(
            run_lodes_tiger(
                dataset,
                geoids,
                wildcard=level,
                aggregation=NumericAggregation(aggregation),
                columns=list(columns) if columns else None,
            )
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    output = output or dataset.output_filename(level)
    _report(response, "LODES")
    _write_output(response, output)
    click.echo(f"Wrote {len(response.join_dataset)} rows -> {output}")


if __name__ == "__main__":
    cli()
