import argparse
import getpass
import json
import sys
from typing import List, Optional

from . import api
from .auth import AuthenticatedCall
from .client import CloudClient
from .config import load_settings
from .errors import CloudError, Messages, user_message
from .models import FileItem
from .session_store import TokenStore
from .utils import format_bytes, get_logger


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    p = argparse.ArgumentParser(prog='fscloud')
    p.add_argument('--session', default=settings.session_path)
    p.add_argument('--base-url', default=settings.base_url)
    sub = p.add_subparsers(dest='cmd', required=True)

    login = sub.add_parser('login')
    login.add_argument('email')
    login.add_argument('--password')

    sub.add_parser('logout')

    ls = sub.add_parser('ls')
    ls.add_argument('--folder')
    ls.add_argument('--search', default='')
    ls.add_argument('--json', action='store_true')

    recent = sub.add_parser('recent')
    recent.add_argument('--limit', type=int, default=20)
    recent.add_argument('--json', action='store_true')

    mkdir = sub.add_parser('mkdir')
    mkdir.add_argument('name')
    mkdir.add_argument('--parent')

    upload = sub.add_parser('upload')
    upload.add_argument('path')
    upload.add_argument('--folder')

    rm = sub.add_parser('rm')
    rm.add_argument('item_id')

    return p


def _print_items(items: List[FileItem], as_json: bool) -> None:
    if as_json:
        print(json.dumps([item.__dict__ for item in items], indent=2))
        return
    for item in items:
        kind = 'd' if item.is_folder else '-'
        size = '-' if item.is_folder else format_bytes(item.size_bytes)
        print(f"{kind} {item.id}\t{size}\t{item.name}")


def run(args: argparse.Namespace, client: CloudClient, store: TokenStore) -> int:
    try:
        store.load()
    except (OSError, ValueError) as exc:
        get_logger('fscloud').warning('Session load failed, starting logged out: %s', exc)
        store.clear()
    calls = AuthenticatedCall(client, store)

    if args.cmd == 'login':
        password = args.password or getpass.getpass('Password: ')
        access_token, refresh_token = api.login(client, args.email, password)
        store.store_session(access_token, refresh_token)
        print(f'OK: session saved to {args.session}')
        return 0

    if args.cmd == 'logout':
        try:
            api.logout(client, store.refresh_token, store.access_token)
        except CloudError as exc:
            get_logger('fscloud').warning('Logout failed: %s', exc)
        store.clear()
        print('OK: logged out')
        return 0

    if args.cmd == 'ls':
        items = calls.execute(lambda token: api.list_files(client, args.folder, token, search=args.search))
        _print_items(items, args.json)
        return 0

    if args.cmd == 'recent':
        items = calls.execute(lambda token: api.recent_files(client, token, limit=args.limit))
        _print_items(items, args.json)
        return 0

    if args.cmd == 'mkdir':
        name = args.name.strip()
        if not name:
            print(f'Error: {Messages.FOLDER_NAME_REQUIRED}', file=sys.stderr)
            return 1
        record = calls.execute(
            lambda token: api.create_folder(client, name, args.parent, token),
            missing_token_message=Messages.LOGIN_REQUIRED,
        )
        print(f'OK: folder {record.name} (id={record.id})')
        return 0

    if args.cmd == 'upload':
        item = calls.execute(lambda token: api.upload_file(client, args.path, args.folder, token))
        print(f'OK: uploaded {item.name} (id={item.id})')
        return 0

    if args.cmd == 'rm':
        calls.execute(lambda token: api.delete_item(client, args.item_id, token))
        print('OK')
        return 0

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()
    client = CloudClient(base_url=args.base_url, timeout=settings.timeout, http_log_path=settings.http_log_path)
    store = TokenStore(args.session)
    try:
        return run(args, client, store)
    except CloudError as exc:
        print(f'Error: {user_message(exc, str(exc))}', file=sys.stderr)
        return 1
    finally:
        client.close()


if __name__ == '__main__':
    raise SystemExit(main())
