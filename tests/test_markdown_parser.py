from rough import events as ev
from rough.events import EventKind, TagKind
from rough.markdown_parser import DEFAULT_PLUGINS, MarkdownParser, iter_events
from rough.protocols import EventParser


def parse(text):
    return list(MarkdownParser().parse(text))


def assert_balanced(events):
    stack = []
    for event in events:
        if event.kind is EventKind.START:
            stack.append(event.tag)
        elif event.kind is EventKind.END:
            assert stack.pop() == event.tag
    assert stack == []


def test_paragraph_with_lone_image():
    events = parse("![alt](a.png)\n")
    assert events == [
        ev.start(TagKind.PARAGRAPH),
        ev.start(TagKind.IMAGE, url="a.png", title=""),
        ev.text("alt"),
        ev.end(TagKind.IMAGE, url="a.png", title=""),
        ev.end(TagKind.PARAGRAPH),
    ]


def test_image_title_is_kept():
    events = parse('![alt](a.png "A title")\n')
    assert events[1] == ev.start(TagKind.IMAGE, url="a.png", title="A title")


def test_heading_carries_level():
    events = parse("## Section\n")
    assert events == [
        ev.start(TagKind.HEADING, level=2),
        ev.text("Section"),
        ev.end(TagKind.HEADING, level=2),
    ]


def test_fenced_code_block():
    events = parse("```python\nx = 1\n```\n")
    assert events == [
        ev.start(TagKind.CODE_BLOCK, info="python"),
        ev.text("x = 1\n"),
        ev.end(TagKind.CODE_BLOCK, info="python"),
    ]


def test_tight_list_items_have_no_paragraphs():
    events = parse("- a\n- b\n")
    assert events[0] == ev.start(TagKind.LIST, ordered=False, start=1)
    assert ev.start(TagKind.PARAGRAPH) not in events
    assert events.count(ev.start(TagKind.ITEM)) == 2
    assert_balanced(events)


def test_blank_lines_produce_no_events():
    events = parse("one\n\n\n\ntwo\n")
    assert events == [
        ev.start(TagKind.PARAGRAPH),
        ev.text("one"),
        ev.end(TagKind.PARAGRAPH),
        ev.start(TagKind.PARAGRAPH),
        ev.text("two"),
        ev.end(TagKind.PARAGRAPH),
    ]


def test_link_and_emphasis():
    events = parse("[*site*](https://example.com)\n")
    assert events[1] == ev.start(TagKind.LINK, url="https://example.com", title="")
    assert events[2] == ev.start(TagKind.EMPHASIS)
    assert_balanced(events)


def test_rule_and_strikethrough():
    events = parse("~~gone~~\n\n---\n")
    assert ev.start(TagKind.STRIKETHROUGH) in events
    assert events[-1] == ev.rule()


def test_table_events_are_balanced():
    events = parse("| A | B |\n|---|---|\n| 1 | 2 |\n")
    kinds = [e.tag.kind for e in events if e.kind is EventKind.START]
    assert kinds[:2] == [TagKind.TABLE, TagKind.TABLE_HEAD]
    assert TagKind.TABLE_ROW in kinds
    assert_balanced(events)


def test_complex_document_is_well_formed():
    text = (
        "# Title\n\n"
        "> quoted *text* and `code`\n\n"
        "1. first\n\n"
        "2. second with ![img](b.png)\n\n"
        "<div>raw</div>\n\n"
        "Footnote here[^1].\n\n"
        "[^1]: The note.\n"
    )
    events = parse(text)
    assert_balanced(events)
    assert ev.code("code") in events
    assert any(e.kind is EventKind.FOOTNOTE_REFERENCE for e in events)


def test_iter_events_handles_unknown_tokens():
    tokens = [
        {"type": "custom_block", "children": [{"type": "text", "raw": "inner"}]},
        {"type": "custom_leaf", "raw": "leaf"},
        {"type": "custom_empty"},
    ]
    assert list(iter_events(tokens)) == [ev.text("inner"), ev.text("leaf")]


def test_parser_is_an_event_parser():
    parser = MarkdownParser()
    assert isinstance(parser, EventParser)
    assert parser.plugins == DEFAULT_PLUGINS
