"""
Minimal non-streaming chat completion.

Run with:
  DIALTONE_API_KEY=... OPENAI_API_KEY=... python examples/quickstart.py
"""

import asyncio

from dialtone import Dialtone


async def main():
    async with Dialtone.from_env(dials={"quality": 0.7, "cost": 0.3}) as client:
        completion = await client.chat.completions.create(
            [{"role": "user", "content": "Hey, what's up?"}],
        )
        print(completion.choices[0].message.content)
        print(f"\nServed by {completion.model} via {completion.provider}")
        if completion.usage:
            print(f"Tokens: {completion.usage.total_tokens}")


if __name__ == "__main__":
    asyncio.run(main())
