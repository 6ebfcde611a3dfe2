"""CLI script to register a user directly in the backend DB.
Usage: python scripts/create_user.py USERNAME PASSWORD [--roles USER,ADMIN]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `unconv` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from unconv.database import engine, create_db_and_tables
from unconv import services, repositories


def main(username: str, password: str, roles: str = "USER") -> int:
    """Create `username` unless it already exists.

    Returns a process exit code: 0 when the user was created, 1 when the
    username is taken.
    """
    create_db_and_tables()
    with Session(engine) as session:
        if repositories.UserRepository(session).get_by_username(username):
            print(f'User already exists: {username}')
            return 1
        user = services.AuthService(session).register(username, password, roles=roles)
        print(f'Created user {user.username} (id {user.id}, roles {user.roles})')
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('username')
    parser.add_argument('password')
    parser.add_argument('--roles', default='USER', help='Comma separated role names')
    args = parser.parse_args()
    sys.exit(main(args.username, args.password, roles=args.roles))
