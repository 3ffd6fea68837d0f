import pytest

from formsuites.ui_testing.framework.base_field import build_host_selector, normalize_label_text
from formsuites.ui_testing.framework.errors import FieldNotFoundError
from formsuites.ui_testing.framework.log_sink import ListSink
from formsuites.ui_testing.framework.text_field import TextField
from formsuites.unit.fake_dom import FakeElement, FakePage, add_field_host, add_value_input


TIMEOUTS = (1, 2, 3)
SELECTOR = build_host_selector("crt-input", "Name")


def _text_field(page, title="Name", sink=None):
    return TextField(page, title, "Name", sink=sink, timeouts_ms=TIMEOUTS)


@pytest.mark.parametrize("raw", ["Name *", "Name:", "Name  ", "  Name", "Name *:", "Name"])
def test_normalize_label_strips_decoration(raw):
    assert normalize_label_text(raw) == "Name"


@pytest.mark.parametrize("raw", ["Name *", "Full name:", " Account *  ", "", None])
def test_normalize_label_is_idempotent(raw):
    once = normalize_label_text(raw)
    assert normalize_label_text(once) == once


def test_normalize_label_keeps_inner_characters():
    assert normalize_label_text("A * B") == "A * B"
    assert normalize_label_text(None) == ""


def test_blank_title_or_code_rejected():
    page = FakePage()
    with pytest.raises(ValueError):
        TextField(page, " ", "Name")
    with pytest.raises(ValueError):
        TextField(page, "Name", "")


async def test_resolution_picks_container_with_matching_label():
    page = FakePage()
    other = add_field_host(page, SELECTOR, "Name of list item")
    add_value_input(other, "input, textarea", "list")
    wanted = add_field_host(page, SELECTOR, "Name *")
    add_value_input(wanted, "input, textarea", "detail")

    field = _text_field(page)

    assert await field.get_value() == "detail"


async def test_label_match_is_case_sensitive():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "name")
    add_value_input(host, "input, textarea")

    field = _text_field(page)

    assert await field.check_if_exist() is False


async def test_resolution_is_cached_after_first_success():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "Name")
    add_value_input(host, "input, textarea")
    field = _text_field(page)

    assert await field.check_if_exist()
    assert await field.check_if_exist()
    assert await field.check_field()

    assert len(page.wait_for_calls) == 1
    assert field.cached_container is not None


async def test_invalidate_cache_forces_new_search():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "Name")
    add_value_input(host, "input, textarea")
    field = _text_field(page)

    await field.check_if_exist()
    field.invalidate_cache()
    assert field.cached_container is None

    await field.check_if_exist()
    assert len(page.wait_for_calls) == 2


async def test_absent_field_exhausts_every_timeout_tier():
    page = FakePage()
    field = _text_field(page)

    assert await field.resolve_container() is None
    assert [call[2] for call in page.wait_for_calls] == list(TIMEOUTS)


async def test_label_mismatch_retries_next_tier():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "Other")
    add_value_input(host, "input, textarea")
    field = _text_field(page)

    assert await field.check_if_exist() is False
    assert len(page.wait_for_calls) == len(TIMEOUTS)


async def test_timeout_override_replaces_tiers():
    page = FakePage()
    field = _text_field(page)

    assert await field.check_if_exist(timeout_override_ms=7) is False
    assert [call[2] for call in page.wait_for_calls] == [7]


async def test_value_operation_on_absent_field_raises():
    page = FakePage()
    field = _text_field(page)

    with pytest.raises(FieldNotFoundError) as exc_info:
        await field.get_value()
    assert "Code='Name'" in str(exc_info.value)

    with pytest.raises(FieldNotFoundError):
        await field.set_value("x")


async def test_container_without_label_is_skipped():
    page = FakePage()
    unlabeled = add_field_host(page, SELECTOR, None)
    add_value_input(unlabeled, "input, textarea", "no label")
    labeled = add_field_host(page, SELECTOR, "Name")
    add_value_input(labeled, "input, textarea", "labeled")

    field = _text_field(page)

    assert await field.get_value() == "labeled"


async def test_debug_messages_go_to_injected_sink():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "Name")
    add_value_input(host, "input, textarea")
    sink = ListSink()
    field = _text_field(page, sink=sink)

    await field.check_if_exist(debug=True)

    assert sink.messages
    assert all(m.startswith("[Field:TextField]") for m in sink.messages)
    assert sink.contains("Attempt 1")
    assert sink.contains("Result=True")


async def test_no_messages_without_debug():
    page = FakePage()
    host = add_field_host(page, SELECTOR, "Name")
    add_value_input(host, "input, textarea")
    sink = ListSink()
    field = _text_field(page, sink=sink)

    await field.check_field()
    await field.get_value()

    assert sink.messages == []


async def test_visibility_wait_uses_first_candidate():
    page = FakePage()
    page.add(SELECTOR, FakeElement(visible=False))
    field = _text_field(page)

    assert await field.resolve_container() is None
