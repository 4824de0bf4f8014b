"""Contact loader runner.

Acts as the host job runner for contact loads stored in job_request:

  # Print the list picker data for a campaign
  python loader.py choices --campaign-id 12

  # Run a queued contact load job
  python loader.py load --job-id 34 --max-contacts 5000
"""
import argparse
import asyncio
import json
import logging
import os
import sys

import db.repositories.jobs as jobs_repo
import db.repositories.organizations as org_repo
from contact_loaders import available_loaders, get_loader
from contact_loaders.host import DatabaseContactLoadHost
from db.connection import dispose_engine, get_db

logger = logging.getLogger(__name__)


async def run_choices(loader_name: str, campaign_id: int) -> dict:
    loader = get_loader(loader_name)
    try:
        async with get_db() as session:
            campaign = await org_repo.get_campaign(session, campaign_id)
            organization = await org_repo.get_for_campaign(session, campaign_id)
        if campaign is None or organization is None:
            raise SystemExit(f"Campaign {campaign_id} not found")
        result = await loader.get_client_choice_data(organization, campaign, None)
    finally:
        await dispose_engine()
    print(json.dumps(result, indent=2))
    return result


async def run_load(loader_name: str, job_id: int, max_contacts: int | None) -> int:
    """Run one job; mark it failed through the host when the loader raises."""
    loader = get_loader(loader_name)
    host = DatabaseContactLoadHost()
    try:
        async with get_db() as session:
            job = await jobs_repo.get_by_id(session, job_id)
            if job is None:
                raise SystemExit(f"Job {job_id} not found")
            organization = await org_repo.get_for_campaign(session, job.campaign_id)
            await jobs_repo.mark_running(session, job_id)

        try:
            summary = await loader.process_contact_load(job, max_contacts, organization, host=host)
        except Exception as e:
            logger.error("Contact load job %s failed: %s", job_id, e, exc_info=True)
            await host.failed_contact_load(job, None, json.dumps({"error": str(e)}))
            return 1
        print(f"  Loaded {summary.final_count} contacts ({summary.skipped_count} skipped)")
        return 0
    finally:
        await dispose_engine()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Campaign contact loader")
    parser.add_argument(
        "--loader",
        default="actionnetwork",
        choices=available_loaders(),
        help="Contact loader to use (default: actionnetwork)",
    )
    sub = parser.add_subparsers(dest="command")

    choices = sub.add_parser("choices", help="Print list picker data for a campaign")
    choices.add_argument("--campaign-id", type=int, required=True)

    load = sub.add_parser("load", help="Run a queued contact load job")
    load.add_argument("--job-id", type=int, required=True)
    load.add_argument("--max-contacts", type=int, default=None, help="Accepted for host parity; not enforced")

    return parser


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    parser = _build_arg_parser()
    args = parser.parse_args()

    if args.command == "choices":
        asyncio.run(run_choices(args.loader, args.campaign_id))

    elif args.command == "load":
        sys.exit(asyncio.run(run_load(args.loader, args.job_id, args.max_contacts)))

    else:
        parser.print_help()
        sys.exit(1)
