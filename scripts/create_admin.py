from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlmodel import Session, select

# --- make project root importable even if CWD is different ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Now we can import our app packages
from skillswap.core.config import settings  # noqa: E402
from skillswap.core.db import engine, init_db  # noqa: E402
from skillswap.core.security import hash_password  # noqa: E402
from skillswap.models.user import User, UserRole  # noqa: E402


def create_super_admin(session: Session) -> None:
    email = settings.admin_email
    user = session.exec(select(User).where(User.email == email)).first()
    if user:
        if user.role != UserRole.SUPER_ADMIN:
            user.role = UserRole.SUPER_ADMIN
            session.add(user)
            session.commit()
            print(f"[admin] upgraded to SUPER_ADMIN: {email}")
        else:
            print(f"[admin] super admin already exists: {email}")
        return

    user = User(
        email=email,
        password_hash=hash_password(settings.admin_password),
        name=settings.admin_name,
        role=UserRole.SUPER_ADMIN,
        # keep the operator account out of search results
        is_public=False,
    )
    session.add(user)
    session.commit()
    print(f"[admin] created super admin: {email}")
    print("[admin] change ADMIN_PASSWORD after the first login")


def promote(session: Session, email: str) -> int:
    user = session.exec(select(User).where(User.email == email)).first()
    if not user:
        print(f"[admin] user not found: {email}")
        return 1
    if user.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN):
        print(f"[admin] {email} is already {user.role.value}")
        return 0
    user.role = UserRole.ADMIN
    session.add(user)
    session.commit()
    print(f"[admin] promoted to ADMIN: {email}")
    return 0


def run(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bootstrap SkillSwap admin accounts.")
    parser.add_argument(
        "--promote",
        metavar="EMAIL",
        help="grant ADMIN to an existing user instead of creating the super admin",
    )
    args = parser.parse_args(argv)

    init_db()
    with Session(engine) as session:
        if args.promote:
            return promote(session, args.promote)
        create_super_admin(session)
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
