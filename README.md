# kiki

Kiki is a small personal assistant for keeping track of tasks and notes.
Everything it knows lives in two plain JSON files on your machine, so your
data stays readable, greppable and easy to back up.

## Installation

```console
pip install .
```

Python 3.10 or newer is required. Kiki has no third-party dependencies.

## Getting started

Create the configuration directory and the empty data files:

```console
kiki init
```

This prints where everything was put. By default the files are:

| File                              | Contents            |
|-----------------------------------|---------------------|
| `$XDG_CONFIG_HOME/kiki/tasks.json` | your tasks          |
| `$XDG_CONFIG_HOME/kiki/notes.json` | your notes          |

When `XDG_CONFIG_HOME` is not set, `~/.config/kiki` is used instead.
Running `kiki init` again never overwrites files that already exist.

Kiki writes its own log to `~/.kiki/kiki.log`.

## Data model

A **task** has an id, a title, a completed flag, an optional due date
(`YYYY-MM-DD`), a priority (`low`, `medium` or `high`; `medium` when none is
given), a list of tags and creation/update timestamps.

A **note** has an id, a title, free-text content, a list of tags and
creation/update timestamps.

New items get time-ordered unique identifiers.

## Using kiki from Python

The storage layer and the task/note operations are available as a library:

```python
import logging

from kiki.storage import Storage
from kiki.tools import ToolHandler

storage = Storage(logging.getLogger("kiki"))
handler = ToolHandler(storage, logging.getLogger("kiki"))

handler.add_task("Buy milk", "2030-01-02", "high", ["errands"])
handler.add_note("API", "Rate limit is 100 requests per minute", ["work"])

print(handler.list_tasks("incomplete"))
print(handler.search_notes("rate limit"))

handler.complete_task("milk")
handler.delete_note("API")
```

Operations that look up a single item (`complete_task`, `delete_task`,
`delete_note`) accept either the exact id or any case-insensitive part of the
title; the first match wins.

Task listings support the filters `all`, `today` (due today or created
today), `incomplete` and `completed`. Note listings support `all` and
`today`, optionally narrowed to a tag (compared case-insensitively).
Listings are numbered so items are easy to refer to, and note previews are
cut to the first 100 characters.

## Running the tests

```console
pip install ".[test]"
pytest
```