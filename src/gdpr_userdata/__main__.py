from pathlib import Path
import argparse
import asyncio
import logging
from typing import List, Optional

from tqdm import tqdm

from .aggregation import EXTRACTOR_COUNT, Aggregator
from .archive import open_archive
from .config import UserDataConfig, load_config
from .frames import applications_frame, email_history_frame, login_frame, screen_name_frame
from .snapshot import load_snapshot, save_snapshot
from .user import UserData

logger = logging.getLogger(__name__)


def setup_logging(config: UserDataConfig) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


async def build_user(archive_path: Path, config: UserDataConfig) -> UserData:
    archive = open_archive(archive_path)

    if not config.show_progress:
        user, outcomes = await Aggregator(config).aggregate_with_report(archive)
    else:
        with tqdm(total=EXTRACTOR_COUNT, desc="Extracting categories") as pbar:
            aggregator = Aggregator(config, progress=lambda outcome: pbar.update(1))
            user, outcomes = await aggregator.aggregate_with_report(archive)

    for outcome in outcomes:
        if not outcome.ok:
            logger.debug(f"{outcome.category}: {outcome.error}")
    return user


def print_summary(user: UserData) -> None:
    age = user.age
    print(f"@{user.screen_name} ({user.name}) id={user.id}")
    print(f"  created:      {user.created_at}")
    print(f"  verified:     {user.verified}")
    print(f"  email:        {user.email_address}")
    print(f"  phone:        {user.phone_number}")
    print(f"  timezone:     {user.timezone}")
    print(f"  creation ip:  {user.account_creation_ip}")
    print(f"  age:          {age.age}" + (f" (inferred {age.inferred.age})" if age.inferred else ""))
    print(f"  languages:    {', '.join(user.personalization.demographics.languages)}")
    print(f"  interests:    {len(user.personalization.interests.names)}")
    print(f"  apps:         {len(user.authorized_applications)}")
    print(f"  logins:       {len(user.last_logins)}")
    print(f"  devices:      {len(user.devices.push_devices)} push, "
          f"{len(user.devices.messaging_devices)} messaging")


def print_history(user: UserData) -> None:
    for title, frame in (
        ("Screen names", screen_name_frame(user)),
        ("Email addresses", email_history_frame(user)),
        ("Logins", login_frame(user)),
        ("Applications", applications_frame(user)),
    ):
        print(f"\n{title}")
        print(frame.to_string(index=False) if not frame.empty else "  (none)")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Merge the account metadata of a Twitter export')
    parser.add_argument('archive', type=Path, nargs='?',
                        help='Extracted export directory or consolidated archive JSON')
    parser.add_argument('--snapshot-in', type=Path, action='append', default=[],
                        help='Snapshot to merge into the record (repeatable)')
    parser.add_argument('--snapshot-out', type=Path, help='Write the merged record to this file')
    parser.add_argument('--config', type=Path, help='JSON configuration file')
    parser.add_argument('--history', action='store_true', help='Print history tables')
    parser.add_argument('--progress', action='store_true', help='Show extraction progress')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)
    if args.archive is None and not args.snapshot_in:
        parser.error("an archive or at least one --snapshot-in is required")

    config = load_config(args.config)
    if args.debug:
        config.log_level = logging.DEBUG
    if args.progress:
        config.show_progress = True
    setup_logging(config)

    if args.archive is not None:
        user = asyncio.run(build_user(args.archive, config))
    else:
        user = UserData()

    for snapshot in args.snapshot_in:
        load_snapshot(snapshot, user)

    print_summary(user)
    if args.history:
        print_history(user)

    if args.snapshot_out:
        save_snapshot(user, args.snapshot_out)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
