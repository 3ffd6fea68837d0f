import pytest

from formsuites.ui_testing.framework.base_field import build_host_selector
from formsuites.ui_testing.framework.boolean_field import BooleanField
from formsuites.ui_testing.framework.lookup_field import LookupField
from formsuites.ui_testing.framework.text_field import TextField
from formsuites.unit.fake_dom import FakeElement, FakePage, add_field_host, add_value_input


TIMEOUTS = (1,)


def _page_with_text_field(
    label="Name *",
    label_class="crt-input-label crt-input-required",
    input_attrs=None,
    read_only_icon=False,
    host_attrs=None,
):
    page = FakePage()
    host = add_field_host(
        page,
        build_host_selector("crt-input", "Name"),
        label,
        label_class=label_class,
        host_attrs=host_attrs,
    )
    if input_attrs is None:
        input_attrs = {"placeholder": "Enter name"}
    add_value_input(host, "input, textarea", attrs=input_attrs)
    if read_only_icon:
        host.add(".readonly-icon", FakeElement())
    return page


def _text_field(page, **overrides):
    declared = dict(read_only=False, required=True, placeholder="Enter name")
    declared.update(overrides)
    return TextField(page, "Name", "Name", timeouts_ms=TIMEOUTS, **declared)


async def test_check_field_passes_when_declaration_matches_dom():
    field = _text_field(_page_with_text_field())

    assert await field.check_if_exist()
    assert await field.check_if_read_only()
    assert await field.check_if_required()
    assert await field.check_placeholder()
    assert await field.check_field()


@pytest.mark.parametrize(
    "override, failing_check",
    [
        ({"read_only": True}, "check_if_read_only"),
        ({"required": False}, "check_if_required"),
        ({"placeholder": "Something else"}, "check_placeholder"),
        ({"placeholder": None}, "check_placeholder"),
    ],
)
async def test_flipping_one_expectation_fails_exactly_that_check(override, failing_check):
    field = _text_field(_page_with_text_field(), **override)

    assert await field.check_field() is False

    for name in ("check_if_read_only", "check_if_required", "check_placeholder"):
        expected = name != failing_check
        assert await getattr(field, name)() is expected, name


async def test_check_field_false_when_absent():
    field = _text_field(FakePage())

    assert await field.check_field() is False
    assert await field.check_if_read_only() is False
    assert await field.check_if_required() is False
    assert await field.check_placeholder() is False


@pytest.mark.parametrize(
    "page_kwargs, detected",
    [
        ({"read_only_icon": True}, True),
        ({"host_attrs": {"readonly": "readonly"}}, True),
        ({"input_attrs": {"placeholder": "Enter name", "readonly": "true"}}, True),
        ({"input_attrs": {"placeholder": "Enter name", "aria-readonly": "true"}}, True),
        ({"host_attrs": {"readonly": ""}}, False),
        ({"input_attrs": {"placeholder": "Enter name", "aria-readonly": "false"}}, False),
    ],
)
async def test_read_only_markers_detected(page_kwargs, detected):
    page = _page_with_text_field(**page_kwargs)
    field = _text_field(page, read_only=True)

    assert await field.check_if_read_only() is detected


async def test_readonly_false_attribute_is_not_read_only():
    page = _page_with_text_field(host_attrs={"readonly": "false"})
    field = _text_field(page, read_only=False)

    assert await field.check_if_read_only()


async def test_disabled_input_counts_as_read_only():
    page = FakePage()
    host = add_field_host(page, build_host_selector("crt-input", "Name"), "Name")
    add_value_input(host, "input, textarea", disabled=True)
    field = TextField(page, "Name", "Name", read_only=True, timeouts_ms=TIMEOUTS)

    assert await field.check_if_read_only()


@pytest.mark.parametrize(
    "input_attrs",
    [
        {"required": "required"},
        {"aria-required": "true"},
        {"class": "mat-input-element ng-invalid required-field"},
    ],
)
async def test_required_markers_on_input(input_attrs):
    page = _page_with_text_field(label_class="crt-input-label", input_attrs=input_attrs)
    field = _text_field(page, required=True, placeholder=None)

    assert await field.check_if_required()


async def test_not_required_when_no_marker():
    page = _page_with_text_field(label_class="crt-input-label", input_attrs={})
    field = _text_field(page, required=False, placeholder=None)

    assert await field.check_if_required()
    assert await field.check_placeholder()
    assert await field.check_field()


async def test_data_placeholder_wins_over_placeholder():
    page = _page_with_text_field(input_attrs={"data-placeholder": "Data", "placeholder": "Plain"})

    assert await _text_field(page, placeholder="Data").check_placeholder()
    assert await _text_field(page, placeholder="Plain").check_placeholder() is False


async def test_blank_placeholders_are_equivalent_to_absent():
    page = _page_with_text_field(input_attrs={"data-placeholder": "  ", "placeholder": "   "})

    assert await _text_field(page, placeholder=None).check_placeholder()
    assert await _text_field(page, placeholder="").check_placeholder()
    assert await _text_field(page, placeholder="  ").check_placeholder()


def _checkbox_page(input_attrs=None, disabled=False, wrapper_class="mat-checkbox"):
    page = FakePage()
    host = add_field_host(
        page,
        build_host_selector("crt-checkbox", "Active"),
        "Active",
        label_selector=".crt-checkbox-label",
        label_class="crt-checkbox-label",
    )
    host.add("mat-checkbox", FakeElement(attrs={"class": wrapper_class}))
    add_value_input(host, "input.mat-checkbox-input", attrs=input_attrs, disabled=disabled)
    return page


async def test_boolean_required_and_placeholder_always_pass():
    field = BooleanField(_checkbox_page(input_attrs={"required": "true"}), "Active", "Active", timeouts_ms=TIMEOUTS)

    assert field.required is False
    assert field.placeholder is None
    assert await field.check_if_required()
    assert await field.check_placeholder()
    assert await field.check_field()


@pytest.mark.parametrize(
    "page_kwargs",
    [
        {"disabled": True},
        {"input_attrs": {"disabled": ""}},
        {"input_attrs": {"class": "mat-checkbox-input mat-checkbox-disabled"}},
        {"wrapper_class": "mat-checkbox mat-checkbox-disabled"},
    ],
)
async def test_boolean_read_only_from_disabled_state(page_kwargs):
    page = _checkbox_page(**page_kwargs)

    assert await BooleanField(page, "Active", "Active", read_only=True, timeouts_ms=TIMEOUTS).check_if_read_only()
    assert await BooleanField(page, "Active", "Active", read_only=False, timeouts_ms=TIMEOUTS).check_if_read_only() is False


async def test_boolean_enabled_checkbox_is_editable():
    field = BooleanField(_checkbox_page(), "Active", "Active", read_only=True, timeouts_ms=TIMEOUTS)

    assert await field.check_field() is False


async def test_lookup_ignores_lock_icon_for_read_only():
    page = FakePage()
    host = add_field_host(page, build_host_selector("crt-combobox", "Owner"), "Owner")
    add_value_input(host, LookupField.VALUE_SELECTOR)
    host.add(".readonly-icon", FakeElement())

    field = LookupField(page, "Owner", "Owner", read_only=False, timeouts_ms=TIMEOUTS)

    assert await field.check_if_read_only()
