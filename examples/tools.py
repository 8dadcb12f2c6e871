"""
Tool calling: let the routed model call a local function, then send the
result back for a final answer.

Run with:
  python examples/tools.py
"""

import asyncio
import json

from dialtone import ChatMessage, Dialtone, Tool, ToolsConfig

WEATHER_TOOL = Tool(
    function={
        "name": "get_current_weather",
        "description": "Get the current weather in a given location",
        "parameters": {
            "type": "object",
            "properties": {
                "location": {"type": "string", "description": "The city, e.g. Paris"},
                "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
            },
            "required": ["location"],
        },
    }
)


def get_current_weather(location: str, unit: str = "fahrenheit") -> str:
    temperatures = {"tokyo": "10", "san francisco": "72", "paris": "22"}
    temperature = temperatures.get(location.split(",")[0].lower(), "unknown")
    return json.dumps({"location": location, "temperature": temperature, "unit": unit})


async def main():
    async with Dialtone.from_env(tools_config=ToolsConfig(parallel_tool_use=True)) as client:
        messages = [
            ChatMessage(
                role="user",
                content="What's the weather like in San Francisco, Tokyo, and Paris?",
            )
        ]
        completion = await client.chat.completions.create(messages, tools=[WEATHER_TOOL])
        reply = completion.choices[0].message
        messages.append(reply)

        for call in reply.tool_calls or []:
            args = call.function.parsed_arguments()
            messages.append(
                ChatMessage(
                    role="tool",
                    content=get_current_weather(**args),
                    tool_call_id=call.id,
                    name=call.function.name,
                )
            )

        followup = await client.chat.completions.create(messages, tools=[WEATHER_TOOL])
        print(followup.choices[0].message.content)


if __name__ == "__main__":
    asyncio.run(main())
