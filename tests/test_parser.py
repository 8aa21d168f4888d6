import pytest

from rssfeed.errors import ParseError
from rssfeed.fetchers.rss import parse_feed
from rssfeed.models import Feed, FeedItem

from feedfixtures import rss


def test_items_in_document_order():
    payload = rss(
        'Example News',
        ('first', 'http://example.com/1'),
        ('second', 'http://example.com/2'),
        ('third', 'http://example.com/3'),
    )
    feed = parse_feed(payload)
    assert feed.publisher_title == 'Example News'
    assert len(feed) == 3
    assert [i.title for i in feed.items] == ['first', 'second', 'third']
    assert feed.items[1] == FeedItem(title='second', link='http://example.com/2')


def test_missing_link_becomes_empty_string():
    feed = parse_feed(rss('Example', ('no link here', None), ('linked', 'http://example.com/x')))
    assert feed.items[0] == FeedItem(title='no link here', link='')
    assert feed.items[1].link == 'http://example.com/x'


def test_missing_item_title_becomes_empty_string():
    payload = (
        b'<?xml version="1.0"?><rss version="2.0"><channel><title>T</title>'
        b'<item><link>http://example.com/a</link></item></channel></rss>'
    )
    feed = parse_feed(payload)
    assert feed.items == (FeedItem(title='', link='http://example.com/a'),)


def test_channel_without_items_is_empty_feed():
    feed = parse_feed(rss('Quiet channel'))
    assert feed == Feed(publisher_title='Quiet channel', items=())


def test_str_payload_is_parsed_as_document():
    feed = parse_feed(rss('Text', ('a', 'http://example.com/a')).decode('utf-8'))
    assert feed.publisher_title == 'Text'
    assert len(feed) == 1


def test_atom_feed_is_accepted():
    payload = (
        b'<?xml version="1.0" encoding="utf-8"?>'
        b'<feed xmlns="http://www.w3.org/2005/Atom"><title>Atom Site</title>'
        b'<entry><title>entry one</title><link href="http://example.com/e1"/></entry>'
        b'</feed>'
    )
    feed = parse_feed(payload)
    assert feed.publisher_title == 'Atom Site'
    assert feed.items == (FeedItem(title='entry one', link='http://example.com/e1'),)


@pytest.mark.parametrize('payload', [b'this is not a feed at all', b''])
def test_non_markup_raises_parse_error(payload):
    with pytest.raises(ParseError):
        parse_feed(payload)


def test_body_naming_a_local_file_is_not_read_from_disk(tmp_path, monkeypatch):
    (tmp_path / 'local.xml').write_bytes(rss('From local disk', ('secret', 'file://x')))
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ParseError):
        parse_feed(b'local.xml')
    with pytest.raises(ParseError):
        parse_feed(str(tmp_path / 'local.xml'))
