"""
Command-line helpers: normalize saved payloads offline or query the upstream.
"""
from __future__ import annotations

import json
import os

import click
from dotenv import load_dotenv

from publications import get_client
from publications.client import MissingApiServer, PublicationClient
from publications.http_client import UpstreamError
from publications.normalizers import apply_interactions
from publications.pagination import parse_comments_page, parse_videos_page
from publications.serialize import comment_to_dict, page_to_dict, video_to_dict
from publications.settings import load_settings


def _echo(payload) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _client() -> PublicationClient:
    try:
        return get_client(load_settings())
    except MissingApiServer as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def cli():
    load_dotenv(os.getenv("PUBLICATIONS_DOTENV", ".env"))


@cli.command()
@click.option("--kind", type=click.Choice(["comments", "videos"]), default="comments", show_default=True)
@click.argument("source", type=click.File("r"), default="-")
def parse(kind: str, source):
    """Normalize a raw JSON payload from SOURCE (default: stdin)."""
    try:
        payload = json.load(source)
    except ValueError as exc:
        raise click.ClickException(f"Invalid JSON: {exc}") from exc
    if kind == "videos":
        _echo(page_to_dict(parse_videos_page(payload), video_to_dict))
    else:
        _echo(page_to_dict(parse_comments_page(payload), comment_to_dict))


@cli.command()
@click.option("--limit", type=int, default=None)
@click.option("--cursor", default=None)
def videos(limit, cursor):
    """Fetch one page of published videos."""
    client = _client()
    try:
        page = client.list_videos(limit=limit, cursor=cursor)
    except UpstreamError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo(page_to_dict(page, video_to_dict))


@cli.command()
@click.argument("video_id")
@click.option("--token", envvar="PUBLICATIONS_TOKEN", default=None, help="Session token for viewer state.")
def video(video_id: str, token):
    """Fetch VIDEO_ID; with a token, overlay the viewer's like state and counts."""
    client = _client()
    try:
        found = client.get_video(video_id, token=token)
        if found is None:
            raise click.ClickException(f"No usable video in upstream response for {video_id}")
        if token:
            found = apply_interactions(found, client.get_interactions(video_id, token=token))
    except UpstreamError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo(video_to_dict(found))


@cli.command()
@click.argument("video_id")
@click.option("--limit", type=int, default=None)
@click.option("--cursor", default=None)
def comments(video_id: str, limit, cursor):
    """Fetch one page of comments for VIDEO_ID."""
    client = _client()
    try:
        page = client.list_comments(video_id, limit=limit, cursor=cursor)
    except UpstreamError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo(page_to_dict(page, comment_to_dict))


if __name__ == "__main__":  # pragma: no cover
    cli()
