import json
import logging
import os

import click

from .decoder import decode_export_uri
from .errors import MigrationError
from .otpauth import build_otpauth_uri, render_qr_ascii, save_qr_png

logger = logging.getLogger(__name__)

HELP = ('Decode the content of the migration format exported from Google Authenticator into a set of otpauth://'
        '\n\nMETHOD is one of: decode (print otpauth:// URIs), json (print the decoded accounts as JSON) '
        'or qr (show a QR code per account, ready to be scanned by another authenticator).'
        '\n\nNote: FILE holds one otpauth-migration:// URI per line, so every part of a multi-part export '
        'can be decoded at once.')


def read_accounts(file: str, strict: bool):
    with open(file, mode='r') as fp:
        lines = fp.readlines()

    accounts = []
    for number, line in enumerate(lines, start=1):
        if line.isspace():
            continue

        try:
            accounts.extend(decode_export_uri(line.strip(), strict=strict))
        except MigrationError as e:
            raise click.BadParameter(
                f'Unable to decode line {number} ({e.stage}): {e}. '
                'Please make sure it is exported from Google Authenticator.',
                param_hint='FILE')

    return accounts


@click.command(help=HELP)
@click.argument(
    'method',
    type=click.Choice(['decode', 'json', 'qr'], case_sensitive=False)
)
@click.argument(
    'file',
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True)
)
@click.option(
    '--strict/--lenient',
    default=False,
    show_default=True,
    help='Reject characters outside the base64 alphabet instead of skipping them'
)
@click.option(
    '--box-size',
    type=click.IntRange(1, 10),
    default=3,
    help='Box size in pixels of the PNG files written with --output-dir; ASCII QR codes are unaffected'
)
@click.option(
    '--output-dir',
    type=click.Path(file_okay=False, dir_okay=True, writable=True),
    default=None,
    help='Save one PNG per account in this directory instead of printing QR codes'
)
@click.option('-v', '--verbose', is_flag=True, help='Log progress information')
def migration(method, file: str, strict: bool, box_size: int, output_dir: str, verbose: bool):
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    accounts = read_accounts(file, strict)
    logger.info('Decoded %d account(s) from %s', len(accounts), file)

    method = method.lower()
    if method == 'json':
        click.echo(json.dumps([account.as_dict() for account in accounts], indent=2, ensure_ascii=False))
        return

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    for index, account in enumerate(accounts, start=1):
        uri = build_otpauth_uri(account)
        if uri is None:
            click.echo(f'# {account.name or "Unnamed account"}: secret unavailable', err=True)
            continue

        if method == 'decode':
            click.echo(uri)
        elif output_dir:
            filename = os.path.join(output_dir, f'{index:03d}.png')
            save_qr_png(uri, filename, box_size=box_size)
            logger.info('Saved %s', filename)
            click.echo(f'{filename}\t{account.issuer or ""}:{account.name or ""}')
        else:
            click.echo(f'{account.issuer or ""} {account.name or ""}'.strip() or 'Account')
            click.echo(render_qr_ascii(uri))


def main():
    migration(auto_envvar_prefix='PYOTPMIGRATE')


if __name__ == '__main__':
    main()
