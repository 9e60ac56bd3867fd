"""Example client for the Nego Agent API."""

import asyncio
import json
from typing import Any

import httpx


class NegoAgentClient:
    """Client for interacting with the Nego Agent API."""

    def __init__(self, base_url: str = "http://localhost:3000") -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(base_url=base_url, timeout=120.0)
        self.chat_id: str | None = None

    async def close(self) -> None:
        """Close the client."""
        await self.client.aclose()

    async def send_message(
        self, message: str, user_id: str | None = None
    ) -> dict[str, Any]:
        """Send a message in the current chat, starting one if needed.

        Args:
            message: Message content
            user_id: Optional user id used for personalization

        Returns:
            dict: chatId, full transcript and raw completion response
        """
        body: dict[str, Any] = {"message": message}
        if self.chat_id:
            body["chatId"] = self.chat_id
        if user_id:
            body["userId"] = user_id

        response = await self.client.post("/v1/chat", json=body)
        response.raise_for_status()
        data = response.json()
        self.chat_id = data["chatId"]
        return data

    async def send_message_stream(self, message: str) -> None:
        """Send a message and print the SSE events of the turn.

        Args:
            message: Message content
        """
        body: dict[str, Any] = {"message": message}
        if self.chat_id:
            body["chatId"] = self.chat_id

        async with self.client.stream("POST", "/v1/chat/stream", json=body) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    data = line[6:]  # Remove "data: " prefix
                    try:
                        print(f"Event: {json.loads(data)}")
                    except json.JSONDecodeError:
                        print(f"Raw data: {data}")

    async def get_messages(self) -> dict[str, Any]:
        """Get the stored transcript of the current chat.

        Returns:
            dict: Message history
        """
        response = await self.client.get(f"/v1/chat/{self.chat_id}/messages")
        response.raise_for_status()
        return response.json()


async def main():
    """Example usage of the Nego Agent API client."""
    client = NegoAgentClient()

    try:
        print("=== Finding Vendors ===")
        data = await client.send_message("Find me 3 vendors for logistics in Berlin")
        print(f"Chat ID: {data['chatId']}")
        for msg in data["messages"]:
            if msg["role"] == "tool":
                vendors = json.loads(msg["content"]).get("vendors", [])
                print(f"- tool returned {len(vendors)} vendors")
        print(f"Assistant: {data['messages'][-1]['content']}")
        print()

        print("=== Follow-up (streamed) ===")
        await client.send_message_stream("Which of them specialises in express delivery?")
        print()

        print("=== Message History ===")
        history = await client.get_messages()
        print(f"Total messages: {history['total']}")
        for msg in history["messages"]:
            print(f"- {msg['role']}: {(msg['content'] or '')[:100]}")

    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
