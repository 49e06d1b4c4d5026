#!/usr/bin/env python3
"""Run one expense message through the extraction pipeline."""
import argparse
import asyncio
import json
import sys

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from expense_parsing.config import Settings
from expense_parsing.international.currency_formatting import format_currency
from expense_parsing.models.expense import ExtractionRequest, GroupContext, Participant
from expense_parsing.pipeline import ExpenseExtractionPipeline
from expense_parsing.utils.logging import setup_logging


async def main(args: argparse.Namespace) -> None:
    """Extract an expense from *args.text* and print the result."""
    settings = Settings()
    setup_logging(settings.log_level)
    pipeline = ExpenseExtractionPipeline(settings)

    participants = [
        Participant(id=f"p{i}", name=name.strip())
        for i, name in enumerate(args.participants.split(","), start=1)
        if name.strip()
    ]
    group = GroupContext(
        participants=participants,
        currency=args.currency or settings.default_currency,
        active_participant_id=participants[0].id if participants else None,
    )
    request = ExtractionRequest(message=args.text, locale=args.locale or settings.default_locale, group=group)

    result = await pipeline.extract_expense(request)

    print(f"State: {result.state} ({result.source}, confidence {result.confidence:.0%})")
    if result.amount is not None:
        print(f"Amount: {format_currency(result.amount, request.locale, result.currency)}")
    print(f"Title: {result.title}")
    print(f"Date: {result.date}")
    print(f"Participants: {', '.join(result.participants) or '-'}")
    if result.clarification_needed:
        print(f"Clarification: {result.clarification_needed}")
    print("-" * 50)
    print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Extract an expense from a message")
    parser.add_argument("text", help='e.g. "I paid $50 for dinner with John and Jane yesterday"')
    parser.add_argument("--participants", default="", help="comma-separated group member names")
    parser.add_argument("--locale", default=None)
    parser.add_argument("--currency", default=None)
    args = parser.parse_args()

    if not args.text.strip():
        print("Error: message is empty")
        sys.exit(1)

    asyncio.run(main(args))
