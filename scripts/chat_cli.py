#!/usr/bin/env python3
"""Interactive chat CLI for testing the weather chat service."""

import sys

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt


class ChatCLI:
    """Interactive chat interface for the weather chat service.

    The service keeps no conversation state, so the CLI holds the history and
    sends it with every message.
    """

    def __init__(self, base_url: str = "http://localhost:3000"):
        """Initialize chat CLI."""
        self.base_url = base_url
        self.history: list[dict[str, str]] = []
        self.console = Console()
        self.client = httpx.Client(timeout=60.0)

    def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                "[bold blue]🌤  Weather Chat - Interactive Chat[/bold blue]\n"
                "Ask about anything, or about the weather somewhere in the US.\n"
                "Commands: /help, /clear, /quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]❌ Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]✅ Connected to weather chat service[/green]\n")

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")

                if user_input.lower() in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif user_input.lower() == "/help":
                    self._show_help()
                    continue
                elif user_input.lower() == "/clear":
                    self.history = []
                    self.console.print("[yellow]🔄 Conversation cleared[/yellow]")
                    continue
                elif user_input.strip() == "":
                    continue

                response = self._send_message(user_input)
                if response:
                    self._display_response(response)

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            response = self.client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _send_message(self, message: str) -> dict | None:
        """Send message and prior history to the chat service."""
        payload = {"history": self.history, "message": message}
        # The user turn stays in the history even if the request fails
        self.history = [*self.history, {"role": "user", "text": message}]

        try:
            self.console.print("[dim]💭 Thinking...[/dim]", end="")
            response = self.client.post(f"{self.base_url}/api/chat", json=payload)
            self.console.print("\r" + " " * 20 + "\r", end="\n")
        except httpx.HTTPError as e:
            self.console.print(f"[red]❌ Connection error: {e}[/red]")
            return None

        data = response.json()
        if response.status_code != 200:
            self.console.print(f"[red]❌ API Error: {response.status_code} - {data.get('error', response.text)}[/red]")
            return None

        self.history = [*self.history, {"role": "model", "text": data["text"]}]
        return data

    def _display_response(self, response: dict) -> None:
        """Display the assistant's answer."""
        subtitle = "[dim]🌦  used weather tool[/dim]" if response.get("toolUsed") else None
        self.console.print(
            Panel(
                Markdown(response.get("text", "No response")),
                title="[bold green]🤖 Assistant[/bold green]",
                subtitle=subtitle,
                border_style="green",
                padding=(1, 2),
            )
        )

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /clear - Clear the conversation history
• /quit or /exit - Exit the chat

[bold]Example Questions:[/bold]
1. "What's the weather in Seattle?"
2. "Will it rain in Denver tomorrow?"
3. "How about London?" (outside NWS coverage)
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"

    chat = ChatCLI(base_url)
    chat.start()


if __name__ == "__main__":
    main()
