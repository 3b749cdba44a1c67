"""
CLI entrypoint for build synchronisation.

Usage:
    python -m buildsync build/MyApp.ipa --account "$SAUCE_USERNAME" --access-key "$SAUCE_ACCESS_KEY"

Prints the storage reference on stdout; logs go to stderr.
"""
import asyncio
import sys

import click

from buildsync.config import settings
from buildsync.errors import BuildSyncError
from buildsync.sync.manager import BuildSync


@click.command("buildsync")
@click.argument("build_path", type=click.Path(dir_okay=False))
@click.option(
    "--account",
    "-u",
    default=None,
    help="Storage account name (default: STORAGE_ACCOUNT)",
)
@click.option(
    "--access-key",
    "-k",
    default=None,
    help="Storage access key (default: STORAGE_ACCESS_KEY)",
)
@click.option(
    "--upload-timeout",
    type=float,
    default=None,
    help="Upload timeout in seconds (default: UPLOAD_TIMEOUT_S)",
)
def main(build_path, account, access_key, upload_timeout):
    """Upload BUILD_PATH to storage unless an identical copy is already there."""
    account = account or settings.storage_account
    access_key = access_key or settings.storage_access_key
    if not account or not access_key:
        raise click.UsageError(
            "account and access key are required (--account/--access-key or "
            "STORAGE_ACCOUNT/STORAGE_ACCESS_KEY)"
        )

    syncer = BuildSync(account, access_key)
    try:
        reference = asyncio.run(syncer.sync(build_path, upload_timeout=upload_timeout))
    except BuildSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(reference)


if __name__ == "__main__":
    main()
