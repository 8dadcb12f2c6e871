"""
Streaming chat completion.

Run with:
  python examples/streaming.py
"""

import asyncio
import os

from dialtone import Dialtone


async def main():
    client = Dialtone.from_dict({
        "api_key": os.environ["DIALTONE_API_KEY"],
        "provider_config": {
            "groq": {"api_key": os.environ["GROQ_API_KEY"]},
            "fireworks": {"api_key": os.environ["FIREWORKS_API_KEY"]},
        },
        "router_model_config": {
            "include_models": ["llama3.1-8b", "llama3.1-70b"],
        },
    })

    async with client:
        print("Streaming response:\n")
        stream = await client.chat.completions.create(
            [{"role": "user", "content": "Tell me a short story about a robot."}],
            stream=True,
        )
        async with stream:
            async for chunk in stream:
                for choice in chunk.choices:
                    print(choice.delta.content or "", end="", flush=True)
                if chunk.usage:
                    print(f"\n\n[{chunk.model} via {chunk.provider}, {chunk.usage.total_tokens} tokens]")
        print("\nDone.")


if __name__ == "__main__":
    asyncio.run(main())
