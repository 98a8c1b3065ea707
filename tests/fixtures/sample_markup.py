"""Sample markup documents for testing.

These fixtures are used for:
- Forward conversion of realistic pages
- Round-trip conversion (markup → HTML → markup → HTML)
- CLI tests that need a file on disk
"""

# Headings, paragraphs, emphasis and lists
SAMPLE_MARKUP_SIMPLE = """# Test Page

This is a simple test page with *basic* formatting.

## Section 1

Some content in section 1.

- Item 1
- Item 2
- Item 3

## Section 2

1. First
2. Second
3. Third
"""

# A 3x3 table with a header row
SAMPLE_MARKUP_TABLE = """| Name | Value | Note |
|------|-------|------|
| Alpha | 1 | first |
| Beta | 2 | second |
"""

# Footnotes defined in a different order than they are referenced
SAMPLE_MARKUP_FOOTNOTES = """[^b]: Second definition
[^a]: First definition

Cites [^a] before [^b].
"""

# Every construct the forward pipeline knows about
SAMPLE_MARKUP_KITCHEN_SINK = """---
title: Kitchen Sink
tags: [demo, test]
---

# Overview {#top}

Text with **bold**, *italic*, ~~gone~~ and ==marked== words.
See [Example](https://example.com "Example site") and [[Main Page|home]].

> Quoted line
> second line

:::info
Heads up.
:::

```python file:hello.py
print("hi")
```

Inline `code` and $x^2$ math.

$$E = mc^2$$

![Logo](logo.png "The logo"){120x40}

@[youtube](dQw4w9WgXcQ)

- [x] done
- [ ] todo

| A | B |
|:---|---:|
| 1 | 2 |

{% infobox name="Ada Lovelace" born=1815 %}

Claim[^src].

[^src]: Some source.

---
"""
