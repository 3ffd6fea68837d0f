import pytest

from formsuites.ui_testing.framework.base_field import build_host_selector
from formsuites.ui_testing.framework.button import Button
from formsuites.ui_testing.framework.config_loader import EngineSettings
from formsuites.ui_testing.framework.errors import ConfigurationError
from formsuites.ui_testing.framework.lookup_field import LookupField
from formsuites.ui_testing.framework.page_config import ButtonConfig, FieldConfig, PageConfig
from formsuites.ui_testing.framework.page_context import PageContext, build_page_context
from formsuites.ui_testing.framework.text_field import TextField
from formsuites.unit.fake_dom import FakePage, add_field_host, add_value_input


SETTINGS = EngineSettings(field_timeouts_ms=(1,))

CONFIG = PageConfig(
    name="ContactEdit",
    url="/shell/#Card/Contacts_FormPage/edit/1",
    fields=[
        FieldConfig(type="Text", title="Name", code="Name"),
        FieldConfig(type="Lookup", title="Owner", code="Owner"),
    ],
    buttons=[ButtonConfig(code="SaveButton", title="Save")],
)


class StubFormPage:
    def __init__(self, page):
        self.page = page
        self.reloads = 0

    async def reload(self, debug=False):
        self.reloads += 1


def _context(page=None, config=CONFIG):
    page = page or FakePage()
    return build_page_context(StubFormPage(page), config, SETTINGS)


def test_fields_and_buttons_keyed_by_code():
    ctx = _context()

    assert isinstance(ctx.get_field("Name"), TextField)
    assert isinstance(ctx.get_field("Owner", LookupField), LookupField)
    assert isinstance(ctx.get_button("SaveButton"), Button)
    assert ctx.get_button("SaveButton").title == "Save"


def test_lookup_is_case_sensitive():
    ctx = _context()

    with pytest.raises(KeyError):
        ctx.get_field("name")
    assert ctx.try_get_field("name") is None


def test_wrong_requested_type_raises():
    ctx = _context()

    with pytest.raises(TypeError) as exc_info:
        ctx.get_field("Name", LookupField)

    assert "TextField" in str(exc_info.value)
    assert ctx.try_get_field("Name", LookupField) is None


def test_blank_codes_rejected():
    ctx = _context()

    with pytest.raises(ValueError):
        ctx.get_field(" ")
    with pytest.raises(ValueError):
        ctx.get_button("")
    assert ctx.try_get_button("") is None


def test_unknown_button():
    ctx = _context()

    with pytest.raises(KeyError):
        ctx.get_button("CloseButton")
    assert ctx.try_get_button("CloseButton") is None


def test_duplicate_codes_rejected():
    config = PageConfig(
        name="P",
        url="/p",
        fields=[FieldConfig(type="Text", title="A", code="Dup"), FieldConfig(type="Number", title="B", code="Dup")],
    )

    with pytest.raises(ConfigurationError):
        _context(config=config)


def test_uninitialized_page_rejected():
    with pytest.raises(ValueError):
        build_page_context(StubFormPage(None), CONFIG, SETTINGS)


async def test_reload_invalidates_field_caches():
    page = FakePage()
    host = add_field_host(page, build_host_selector("crt-input", "Name"), "Name")
    add_value_input(host, "input, textarea", "John")
    form_page = StubFormPage(page)
    ctx = build_page_context(form_page, CONFIG, SETTINGS)

    field = ctx.get_field("Name")
    assert await field.get_value() == "John"
    assert field.cached_container is not None

    await ctx.reload()

    assert form_page.reloads == 1
    assert field.cached_container is None


async def test_check_all_fields_reports_per_code():
    page = FakePage()
    host = add_field_host(page, build_host_selector("crt-input", "Name"), "Name")
    add_value_input(host, "input, textarea")

    results = await _context(page).check_all_fields()

    assert results == {"Name": True, "Owner": False}
