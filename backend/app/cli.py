"""Management CLI for organizations and local development.

Usage:
    python -m app.cli create-tables                        # Create any missing tables
    python -m app.cli create-org "Green Acres" [email]     # Register an organization
    python -m app.cli list-orgs                            # Show all organizations
    python -m app.cli issue-token ORG_ID [role] [user_id]  # Mint a bearer token
"""

import asyncio
import sys
import uuid

from app.auth.jwt import create_access_token
from app.database import async_session, create_tables
from app.repositories.organizations import OrganizationRepository
from app.services.lifecycle import make_broker
from app.store.client import StoreClient
from app.tenancy import OrgRole

USAGE = "Usage: python -m app.cli [create-tables|create-org|list-orgs|issue-token]"


async def _with_repo(action):
    broker = make_broker()
    try:
        return await action(OrganizationRepository(StoreClient(async_session, broker)))
    finally:
        await broker.close()


def create_org(name: str, email: str | None = None):
    org = asyncio.run(_with_repo(lambda repo: repo.create({"name": name, "email": email})))
    print(f"  Created {org.name}: {org.id}")


def list_orgs():
    orgs = asyncio.run(_with_repo(lambda repo: repo.list_all()))
    for org in orgs:
        print(f"  {org.id}  {org.name}  ({org.subscription_plan}/{org.subscription_status})")
    print(f"\n{len(orgs)} organization(s)")


def issue_token(organization_id: str, role: str = OrgRole.ADMIN.value, user_id: str | None = None):
    role = OrgRole(role).value
    print(create_access_token(user_id or str(uuid.uuid4()), organization_id, role))


def main(argv: list[str]) -> int:
    cmd, args = (argv[0], argv[1:]) if argv else ("", [])
    if cmd == "create-tables":
        asyncio.run(create_tables())
        print("  Tables ready")
    elif cmd == "create-org" and 1 <= len(args) <= 2:
        create_org(*args)
    elif cmd == "list-orgs":
        list_orgs()
    elif cmd == "issue-token" and 1 <= len(args) <= 3:
        issue_token(*args)
    else:
        print(USAGE)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
