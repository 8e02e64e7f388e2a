"""
Terminal chat loop — the same Composition Root as the FastAPI app, without HTTP.

Each answer carries the conversation history forward, like the web client does.

    export AWS_PROFILE=<your-profile>
    python -m investai.infrastructure.entrypoints.chat_cli
"""

import asyncio

from dotenv import load_dotenv

from investai.domain.errors import ConfigurationError
from investai.infrastructure.entrypoints.fastapi_app import build_run_use_case


async def _chat() -> None:
    use_case, observability = build_run_use_case()
    history: list = []
    print("Ask about a stock (empty line to quit).")
    try:
        while True:
            message = input("\n> ").strip()
            if not message:
                break
            result = await use_case.execute(message, history)
            if not result.succeeded:
                print(f"[failed: {result.error}]")
                continue
            for step in result.steps:
                print(f"  - {step.calculation}: {step.reasoning}")
            print(f"\n{result.final_text}")
            history = result.transcript
    finally:
        if observability is not None:
            observability.flush()


def main() -> None:
    load_dotenv()
    try:
        asyncio.run(_chat())
    except ConfigurationError as exc:
        print(exc)


if __name__ == "__main__":
    main()
