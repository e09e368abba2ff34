"""Tests for tag normalization, URL building and the render pass."""

import pytest

from tools5e_taglinks.config import TagLinkSettings
from tools5e_taglinks.engine import TagResolutionEngine
from tools5e_taglinks.links import (
    build_base_url,
    build_url,
    default_hash,
    link_tags,
    normalize_tag,
    normalize_tag_text,
    tag_style,
)
from tools5e_taglinks.models import TagReference


DATA = "https://5e.tools/data"


class TestNormalization:
    """Test tag aliases and tag text cleanup."""

    @pytest.mark.parametrize("raw,expected", [
        ("@monster", "@creature"),
        ("@classtype", "@class"),
        ("spell", "@spell"),
        ("@Item", "@item"),
    ])
    def test_normalize_tag(self, raw, expected):
        assert normalize_tag(raw) == expected

    def test_normalize_tag_text(self):
        assert normalize_tag_text("fireball;phb;Big Boom") == "fireball|phb|Big Boom"

    def test_default_hash(self):
        assert default_hash("Shadow Blade", "XGE") == "shadow%20blade_xge"
        assert default_hash("Goblin", "") == "goblin"


class TestStyles:
    """Test per-kind styling."""

    def test_spell_style(self):
        style = tag_style("@spell")
        assert style.icon == "🪄"
        assert style.bg_color == "RebeccaPurple"
        assert style.color == "White"

    def test_monster_alias_uses_creature_style(self):
        assert tag_style("@monster").bg_color == "LightBlue"

    def test_hide_icons(self):
        style = tag_style("@item", hide_icons=True)
        assert style.icon is None
        assert style.bg_color == "Khaki"

    def test_unknown_tag_default_style(self):
        style = tag_style("@condition")
        assert style.icon is None
        assert style.color == "Black"


class TestUrls:
    """Test link target generation."""

    def test_link_mode_collapses_slashes(self):
        settings = TagLinkSettings(mode="link")
        base = build_base_url(settings, "@spell", "spells.html", "fireball_phb")
        assert build_url(settings, base) == "https://5e.tools/spells.html#fireball_phb"

    def test_skill_points_to_quick_reference(self):
        settings = TagLinkSettings(mode="link")
        base = build_base_url(settings, "@skill", "", "")
        assert build_url(settings, base) == (
            "https://5e.tools/quickreference.html#bookref-quick,2,skills"
        )

    def test_sense_points_to_quick_reference(self):
        settings = TagLinkSettings(mode="link")
        base = build_base_url(settings, "@sense", "", "")
        assert base.endswith("#bookref-quick,2,vision and light")

    def test_opengate_mode(self):
        settings = TagLinkSettings(mode="opengate", open_gate_title="5e Tools")
        base = build_base_url(settings, "@item", "items.html", "longsword_phb")

        url = build_url(settings, base)

        assert url == (
            "obsidian://opengate?id=5etools&title=5e%20Tools"
            "&url=https%3A%2F%2F5e.tools%2Fitems.html%23longsword_phb"
        )


class TestLinkTags:
    """Test the concurrent render pass."""

    @pytest.mark.asyncio
    async def test_failing_tag_does_not_stop_others(self, build_mock_client, settings, notices):
        client = build_mock_client({
            f"{DATA}/spells/spells-phb.json": {"spell": [{"name": "Fireball", "source": "PHB"}]},
        })
        engine = TagResolutionEngine(settings, client=client, notify=notices.append)
        references = [
            TagReference(tag="@spell", name="Fireball", source="PHB", page="spells.html",
                         hash="fireball_phb", text="fireball|phb"),
            TagReference(tag="@monster", name="Goblin", source="MM", page="bestiary.html",
                         hash="goblin_mm", text="goblin|mm"),
            TagReference(tag="@skill", name="Athletics", text="Athletics"),
        ]

        links = await link_tags(engine, settings, references)

        spell, creature, skill = links
        assert spell.resolved.entity["name"] == "Fireball"
        assert spell.url == "https://5e.tools/spells.html#fireball_phb"
        assert spell.icon == "🪄"

        assert creature.is_error
        assert creature.tag == "@creature"
        assert creature.label == "goblin|mm"
        assert creature.url is None

        assert not skill.is_error
        assert skill.resolved is None
        assert skill.url.endswith("quickreference.html#bookref-quick,2,skills")

    @pytest.mark.asyncio
    async def test_display_text_used_as_label(self, build_mock_client, settings, notices):
        client = build_mock_client({
            f"{DATA}/spells/spells-phb.json": {"spell": [{"name": "Fireball", "source": "PHB"}]},
        })
        engine = TagResolutionEngine(settings, client=client, notify=notices.append)

        [link] = await link_tags(engine, settings, [
            TagReference(tag="@spell", name="Fireball", source="PHB",
                         page="spells.html", display_text="big boom"),
        ])

        assert link.label == "big boom"
        assert link.url.endswith("#fireball_phb")

    @pytest.mark.asyncio
    async def test_ignored_tags_are_not_resolved(self, build_mock_client, notices):
        settings = TagLinkSettings(mode="link", ignored_tags=["spell"])
        client = build_mock_client({})
        engine = TagResolutionEngine(settings, client=client, notify=notices.append)

        [link] = await link_tags(engine, settings, [
            TagReference(tag="@spell", name="Fireball", source="PHB", page="spells.html"),
        ])

        assert link.resolved is None
        assert not link.is_error
        client.get.assert_not_awaited()
