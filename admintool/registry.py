"""Static table of top-level commands, their aliases and handler factories."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from admintool.errors import CommandRegistrationError

if TYPE_CHECKING:
    from admintool.commands.base import CommandHandler

HandlerFactory = Callable[[Any], 'CommandHandler']


@dataclass(frozen=True)
class CommandEntry:
    """One top-level command.

    ``factory`` receives the admin client handle (possibly the no-client
    sentinel) and returns the handler. ``local_run`` marks commands that may
    run in-process without a cluster connection.
    """

    name: str
    factory: HandlerFactory
    aliases: frozenset[str] = field(default_factory=frozenset)
    hidden: bool = False
    local_run: bool = False

    @property
    def tokens(self) -> frozenset[str]:
        return self.aliases | {self.name}


class CommandRegistry:
    """Insertion-ordered mapping from command tokens to entries."""

    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}
        self._aliases: dict[str, str] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        factory: HandlerFactory,
        *,
        aliases: Iterable[str] = (),
        hidden: bool = False,
        local_run: bool = False,
    ) -> CommandEntry:
        """Add a command; colliding names or aliases fail immediately."""
        if self._frozen:
            msg = f'cannot register "{name}": registry is frozen'
            raise CommandRegistrationError(msg)

        alias_set = frozenset(aliases)
        for token in (name, *sorted(alias_set)):
            if token in self:
                msg = f'command token "{token}" is already registered'
                raise CommandRegistrationError(msg)
        if name in alias_set:
            msg = f'command "{name}" lists itself as an alias'
            raise CommandRegistrationError(msg)

        entry = CommandEntry(
            name=name,
            factory=factory,
            aliases=alias_set,
            hidden=hidden,
            local_run=local_run,
        )
        self._entries[name] = entry
        for alias in alias_set:
            self._aliases[alias] = name
        return entry

    def freeze(self) -> 'CommandRegistry':
        """Reject further registrations."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, token: str) -> CommandEntry | None:
        """Return the entry reachable through a canonical name or alias."""
        name = self._aliases.get(token, token)
        return self._entries.get(name)

    def __contains__(self, token: object) -> bool:
        return token in self._entries or token in self._aliases

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[CommandEntry]:
        return list(self._entries.values())

    def visible_entries(self) -> list[CommandEntry]:
        """Entries shown in help, in registration order."""
        return [entry for entry in self._entries.values() if not entry.hidden]
