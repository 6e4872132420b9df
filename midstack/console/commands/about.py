from __future__ import annotations

from midstack.__version__ import __version__
from midstack.console.commands.command import Command


class AboutCommand(Command):
    name = "about"
    description = "Shows the midstack version and where its settings come from."

    def handle(self) -> int:
        self.line(f"<info>midstack</info> version <comment>{__version__}</comment>")
        self.line("Build and run middleware stacks around any environment value.")

        sources = self.settings.sources
        if not sources:
            self.line("Settings: defaults")
        for source in sources:
            self.line(f"Settings: {source}")
        return 0
