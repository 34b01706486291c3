"""
Create a user without going through the HTTP API. Run from project root:
  python -m storefront.scripts.create_user NAME EMAIL PASSWORD
Example:
  python -m storefront.scripts.create_user "Site Admin" admin@example.com your-secure-password
"""
import argparse
import logging
import sys

from pydantic import ValidationError as SchemaValidationError

from storefront.core.config import get_settings
from storefront.core.database import build_engine, build_session_factory
from storefront.core.errors import StorefrontError
from storefront.repositories import UserRepository
from storefront.schemas.auth import RegisterRequest
from storefront.services.file_store import FileStore
from storefront.services.users import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Storefront user.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (6-72 chars, at most 72 bytes)")
    args = parser.parse_args(argv)

    try:
        data = RegisterRequest(name=args.name, email=args.email, password=args.password)
    except SchemaValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL, debug=settings.DEBUG)
    db = build_session_factory(engine)()
    try:
        service = UserService(
            UserRepository(db),
            FileStore(settings.UPLOAD_DIR, url_prefix=settings.UPLOAD_URL_PREFIX),
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
        user = service.register(data)
    except StorefrontError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{user.email}' with id {user.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
