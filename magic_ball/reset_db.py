import argparse
import asyncio
import logging

from magic_ball.crud import DeleteData
from magic_ball.db import Session

logging.basicConfig(level=logging.INFO)


async def reset_all(Session=Session) -> tuple[int, int]:
    """Delete every prediction, then every user, in one transaction

    Returns:
        tuple[int, int]: Deleted predictions and deleted users
    """
    async with Session() as session:
        async with session.begin():
            deleted_predictions = await DeleteData.delete_all_predictions(session)
            deleted_users = await DeleteData.delete_all_users(session)
    return deleted_predictions, deleted_users


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delete all predictions and users")
    parser.add_argument("--confirm", action="store_true", help="Actually delete the data")
    return parser


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    if not args.confirm:
        parser.error("refusing to wipe the database without --confirm")
    asyncio.run(reset_all())
