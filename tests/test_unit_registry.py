"""Unit tests for the command registry."""

import pytest
from msc.errors import InvalidOption
from msc.registry import (
    COMMANDS,
    REGISTRY,
    ArgGrammar,
    CommandDescriptor,
    CommandKind,
    CommandRegistry,
    action,
)


class TestAliases:
    @pytest.mark.parametrize(
        "alias,name",
        [
            ("vol", "volume"),
            ("pause", "playpause"),
            ("sleep", "standby"),
            ("lighting", "lightTheme"),
            ("max", "maxVolume"),
            ("timeout", "standbyTimeout"),
            ("queue", "playqueue"),
            ("capabilities", "system/capabilities"),
            ("poweramp", "outputs/poweramp"),
            ("input", "inputs"),
        ],
    )
    def test_alias_resolves_to_canonical(self, alias, name):
        assert REGISTRY.resolve_alias(alias) == name
        assert REGISTRY.lookup(alias).name == name

    def test_canonical_names_pass_through(self):
        assert REGISTRY.resolve_alias("volume") == "volume"

    def test_aliases_never_collide(self):
        names = {d.name for d in COMMANDS}
        aliases = [a for d in COMMANDS for a in d.aliases]
        assert len(aliases) == len(set(aliases))
        assert not names & set(aliases)


class TestLookup:
    @pytest.mark.parametrize("option", ["", None, "volumes", "Volume", "levels/volume"])
    def test_unknown_option(self, option):
        with pytest.raises(InvalidOption):
            REGISTRY.lookup(option)

    def test_contains(self):
        assert "vol" in REGISTRY
        assert "bogus" not in REGISTRY

    def test_every_name_has_one_kind(self):
        assert len(REGISTRY) == len(COMMANDS)
        for descriptor in REGISTRY:
            assert isinstance(descriptor.kind, CommandKind)


class TestDescriptors:
    def test_volume_is_bounded(self):
        volume = REGISTRY.lookup("volume")
        assert volume.kind is CommandKind.STATEFUL_FIELD
        assert volume.grammar is ArgGrammar.RELATIVE_OR_ABSOLUTE
        assert (volume.field.endpoint, volume.field.key, volume.field.max) == ("levels", "volume", 100)

    def test_standby_timeout_max(self):
        assert REGISTRY.lookup("timeout").field.max == 120

    @pytest.mark.parametrize("name,mod", [("repeat", 3), ("shuffle", 2), ("lightTheme", 3), ("position", 3), ("mute", 2)])
    def test_cycling_moduli(self, name, mod):
        assert REGISTRY.lookup(name).field.mod == mod

    def test_action_path(self):
        standby = REGISTRY.lookup("standby")
        assert (standby.method, standby.path) == ("PUT", "power?system=lona")

    def test_query_dump_defaults(self):
        dump = REGISTRY.lookup("network").dump
        assert dump.skip == 5
        assert dump.exclude == {"children", "cpu"}


class TestRegistryValidation:
    def test_duplicate_name(self):
        with pytest.raises(ValueError):
            CommandRegistry([action("x", "a", "q=1"), action("x", "b", "q=2")])

    def test_alias_shadowing_name(self):
        with pytest.raises(ValueError):
            CommandRegistry([action("x", "a", "q=1"), action("y", "b", "q=2", aliases=("x",))])

    def test_alias_collision(self):
        with pytest.raises(ValueError):
            CommandRegistry([action("x", "a", "q=1", aliases=("z",)), action("y", "b", "q=2", aliases=("z",))])

    def test_custom_registry(self):
        registry = CommandRegistry([CommandDescriptor("ping", CommandKind.ACTION, "system", query="ping=1")])
        assert registry.lookup("ping").path == "system?ping=1"
