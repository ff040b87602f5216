import pytest
from pydantic import ValidationError

from errors import (
    DuplicateTemplateId,
    InvalidTemplateDefinition,
    LastTemplateRemaining,
    MissingIdOrName,
    MissingTemplateId,
    TemplateNotFound,
)
from models.template import EDUCATION_RULES, BUSINESS_RULES, ImageRules, LayoutVariant, TemplateDefinition
from settings import Settings
from utils.template_registry import TemplateRegistry, build_registry, load_template_configs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _template(template_id="t1", name="T1", rules=None) -> TemplateDefinition:
    return TemplateDefinition(id=template_id, name=name, rules=rules or ImageRules())


# ---------------------------------------------------------------------------
# Built-in policies
# ---------------------------------------------------------------------------

class TestBuiltinPolicies:
    @pytest.mark.parametrize("count, expected", [
        (0, LayoutVariant.SINGLE_IMAGE),
        (1, LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION),
        (2, LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION),
        (3, LayoutVariant.DOUBLE_IMAGE_NO_CAPTION),
        (10, LayoutVariant.DOUBLE_IMAGE_NO_CAPTION),
    ])
    def test_business(self, registry, count, expected):
        assert registry.get_by_id("business").select_variant(count) is expected

    def test_creative_matches_business(self, registry):
        creative = registry.get_by_id("creative")
        for count in range(6):
            assert creative.select_variant(count) is registry.get_by_id("business").select_variant(count)

    def test_simple_always_single(self, registry):
        simple = registry.get_by_id("simple")
        assert {simple.select_variant(n) for n in range(10)} == {LayoutVariant.SINGLE_IMAGE}

    @pytest.mark.parametrize("count, expected", [
        (0, LayoutVariant.SINGLE_IMAGE),
        (1, LayoutVariant.SINGLE_IMAGE),
        (2, LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION),
        (7, LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION),
    ])
    def test_education(self, registry, count, expected):
        assert registry.get_by_id("education").select_variant(count) is expected


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

class TestReads:
    def test_builtins_in_order(self, registry):
        assert [t.id for t in registry.all_templates()] == ["business", "simple", "education", "creative"]

    def test_default_is_business(self, registry):
        assert registry.default_id == "business"
        assert registry.get_default().id == "business"

    def test_get_unknown_returns_none(self, registry):
        assert registry.get_by_id("nope") is None

    def test_contains_and_len(self, registry):
        assert "simple" in registry
        assert "nope" not in registry
        assert len(registry) == 4

    def test_returned_definitions_are_immutable(self, registry):
        template = registry.get_by_id("business")
        with pytest.raises(ValidationError):
            template.id = "renamed"
        with pytest.raises(ValidationError):
            template.rules = None
        assert registry.get_by_id("business").id == "business"
        assert registry.get_by_id("business").rules == BUSINESS_RULES


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            TemplateRegistry([])

    def test_duplicate_rejected(self):
        with pytest.raises(DuplicateTemplateId):
            TemplateRegistry([_template("a"), _template("a")])

    def test_unknown_default_rejected(self):
        with pytest.raises(TemplateNotFound):
            TemplateRegistry([_template("a")], default_id="b")

    def test_default_falls_back_to_first(self):
        assert TemplateRegistry([_template("a"), _template("b")]).default_id == "a"


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

class TestAdd:
    def test_add(self, registry):
        registry.add(_template("mine"))
        assert registry.get_by_id("mine").name == "T1"
        assert len(registry) == 5

    def test_add_duplicate(self, registry):
        with pytest.raises(DuplicateTemplateId):
            registry.add(_template("business"))
        assert len(registry) == 4

    def test_add_without_rules(self, registry):
        with pytest.raises(InvalidTemplateDefinition):
            registry.add(TemplateDefinition.model_construct(id="x", name="X", rules=None))
        assert "x" not in registry

    def test_add_without_name(self, registry):
        with pytest.raises(InvalidTemplateDefinition):
            registry.add(TemplateDefinition(id="x", name="", rules=ImageRules()))


class TestRemove:
    def test_remove(self, registry):
        registry.remove("simple")
        assert "simple" not in registry

    def test_remove_empty_id(self, registry):
        with pytest.raises(MissingTemplateId):
            registry.remove("")

    def test_remove_unknown(self, registry):
        with pytest.raises(TemplateNotFound):
            registry.remove("nope")

    def test_last_template_guard(self):
        registry = TemplateRegistry([_template("only")])
        with pytest.raises(LastTemplateRemaining):
            registry.remove("only")
        assert len(registry) == 1
        assert registry.default_id == "only"

    def test_removing_default_reassigns(self, registry):
        registry.add(_template("mine"))
        registry.set_default("mine")
        registry.remove("mine")
        assert registry.default_id == "business"

    def test_removing_first_default_picks_next(self):
        registry = TemplateRegistry([_template("a"), _template("b"), _template("c")])
        registry.remove("a")
        assert registry.default_id == "b"


class TestSetDefault:
    def test_set_default(self, registry):
        registry.set_default("education")
        assert registry.get_default().id == "education"

    def test_set_unknown_default(self, registry):
        with pytest.raises(TemplateNotFound):
            registry.set_default("nope")
        assert registry.default_id == "business"


class TestCreateCustom:
    def test_inherits_from_base(self, registry):
        template = registry.create_custom({"id": "mine", "name": "Mine", "baseTemplateId": "education"})
        assert template.rules == EDUCATION_RULES
        assert template.description == registry.get_by_id("education").description
        assert template.is_built_in is False
        assert registry.get_by_id("mine") == template

    def test_unknown_base_uses_default(self, registry):
        template = registry.create_custom({"id": "mine", "name": "Mine", "baseTemplateId": "nope"})
        assert template.rules == BUSINESS_RULES

    def test_explicit_rules_and_description(self, registry):
        template = registry.create_custom({
            "id": "mine",
            "name": "Mine",
            "description": "自定义",
            "imageRules": {"minImagesForDoubleWithCaption": 5},
        })
        assert template.description == "自定义"
        assert template.select_variant(4) is LayoutVariant.SINGLE_IMAGE
        assert template.select_variant(5) is LayoutVariant.DOUBLE_IMAGE_WITH_CAPTION

    @pytest.mark.parametrize("config", [{"name": "Mine"}, {"id": "mine"}, {"id": "", "name": "Mine"}])
    def test_missing_id_or_name(self, registry, config):
        with pytest.raises(MissingIdOrName):
            registry.create_custom(config)
        assert len(registry) == 4

    def test_duplicate_id(self, registry):
        with pytest.raises(DuplicateTemplateId):
            registry.create_custom({"id": "simple", "name": "Again"})

    def test_malformed_rules(self, registry):
        with pytest.raises(InvalidTemplateDefinition):
            registry.create_custom({"id": "x", "name": "X", "imageRules": {"minImagesForDoubleWithCaption": -1}})


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------

class TestBuildRegistry:
    def test_builtins_only(self):
        registry = build_registry(Settings())
        assert len(registry) == 4
        assert registry.default_id == "business"

    def test_configured_default(self):
        registry = build_registry(Settings(default_template="creative"))
        assert registry.default_id == "creative"

    def test_unknown_default_keeps_business(self):
        registry = build_registry(Settings(default_template="nope"))
        assert registry.default_id == "business"

    def test_templates_file(self, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text(
            "templates:\n"
            "  - id: campus\n"
            "    name: 校园风格\n"
            "    baseTemplateId: education\n"
            "  - id: gallery\n"
            "    name: 图集\n"
            "    imageRules:\n"
            "      minImagesForDoubleNoCaption: 1\n",
            encoding="utf-8",
        )
        registry = build_registry(Settings(templates_file=path, default_template="campus"))
        assert registry.default_id == "campus"
        assert registry.get_by_id("campus").rules == EDUCATION_RULES
        assert registry.get_by_id("gallery").select_variant(1) is LayoutVariant.DOUBLE_IMAGE_NO_CAPTION


class TestLoadTemplateConfigs:
    def test_plain_list(self, tmp_path):
        path = tmp_path / "t.yaml"
        path.write_text("- id: a\n  name: A\n", encoding="utf-8")
        configs = load_template_configs(path)
        assert [c.id for c in configs] == ["a"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "t.yaml"
        path.write_text("", encoding="utf-8")
        assert load_template_configs(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_template_configs(tmp_path / "missing.yaml")
