# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/15 01:04:45
# @Author : Kariko Lin

"""YINI text -> `Section` tree, and the file IO around it.

Parsing goes in 3 steps:
1. Strip `/* block comments */` off the whole text,
and then `// line comments` off each line.
2. Walk lines, keeping a stack of open section names.
The count of leading `^` tells the depth of a section header.
3. Parse the literal after `=` into a typed `Value`.

Note the comment scan is naive: it doesn't know about quotes,
so `'http://...'` gets cut at `//`.
"""

import logging
from io import TextIOBase
from warnings import warn

import chardet

from .abstract import FileHandler
from .consts import DEFAULT_INDENT, FALSE_WORDS, QUOTES, TRUE_WORDS, YiniMark
from .model import InvalidNameError, Section, Value, YiniError, parse_number
from .writer import serialize


class FormatError(YiniError, ValueError):
    """Syntax fault in YINI text. Parsing stops at the first one."""
    def __init__(
        self, reason: str,
        lineno: int | None = None, line: str | None = None
    ) -> None:
        self.reason = reason
        self.lineno = lineno
        self.line = line
        msg = reason if lineno is None else (
            f'{reason} at line {lineno}: {line}')
        super().__init__(msg)


class FileError(YiniError, OSError):
    """Unable to open, read or write a YINI file."""
    pass


# comments

def _strip_block_comments(content: str) -> tuple[str, list[int]]:
    """Remove `/* */` comments, left to right.

    Returns the cleaned text, and the source line number
    each cleaned line starts at (block comments may swallow newlines).
    """
    kept: list[str] = []
    linemap, srcline, pos = [1], 1, 0
    blank = True  # nothing but spaces kept on the current line yet

    def keep(chunk: str) -> None:
        nonlocal srcline, blank
        kept.append(chunk)
        for _ in range(chunk.count('\n')):
            srcline += 1
            linemap.append(srcline)
        if '\n' in chunk:
            blank = True
        blank = blank and not chunk.rpartition('\n')[2].strip()

    while (start := content.find(YiniMark.BLOCK_OPEN.value, pos)) != -1:
        keep(content[pos:start])
        end = content.find(YiniMark.BLOCK_CLOSE.value, start + 2)
        if end == -1:
            warn(f'Unclosed block comment at line {srcline}, '
                 'the rest of the document is ignored.')
            return ''.join(kept), linemap
        if (lines := content.count('\n', start, end)) > 0:
            srcline += lines
            # a line that starts right after the comment.
            if blank:
                linemap[-1] = srcline
        pos = end + 2
    keep(content[pos:])
    return ''.join(kept), linemap


def strip_line_comment(line: str) -> str:
    return line.split(YiniMark.LINE_COMMENT.value, 1)[0]


def strip_comments(content: str) -> str:
    """Remove both block and line comments. Pure text transform."""
    cleaned, _ = _strip_block_comments(content)
    return '\n'.join(strip_line_comment(i) for i in cleaned.split('\n'))


# literals

def _split_items(inner: str) -> list[str]:
    """Split array content on top level commas,
    skipping those inside nested brackets or quotes."""
    ret: list[str] = []
    depth, quote, start = 0, '', 0
    for i, c in enumerate(inner):
        if quote:
            if c == quote:
                quote = ''
        # a quote only opens a string at the head of an item.
        elif c in QUOTES and not inner[start:i].strip():
            quote = c
        elif c == YiniMark.ARRAY_OPEN.value:
            depth += 1
        elif c == YiniMark.ARRAY_CLOSE.value and depth > 0:
            depth -= 1
        elif c == YiniMark.ARRAY_SEP.value and depth == 0:
            ret.append(inner[start:i])
            start = i + 1
    ret.append(inner[start:])
    return [j for i in ret if (j := i.strip())]


def parse_literal(text: str) -> Value:
    """Parse a trimmed literal, the first match wins:

    1. `'quoted'` or `"quoted"` -> string, without escapes.
    2. `[a, b, ...]` -> array, items parsed recursively.
    3. `true/yes/on`, `false/no/off` (any case) -> bool.
    4. numbers, float if there's a `.`.
    5. anything else -> string as is.

    Raises:
        FormatError: an opening quote or `[` never gets closed.
    """
    if not text:
        return Value('')
    head, tail = text[0], text[-1]
    if head in QUOTES:
        if len(text) < 2 or tail != head:
            raise FormatError(f'Unterminated string literal {text}')
        return Value(text[1:-1])
    if head == YiniMark.ARRAY_OPEN.value:
        if tail != YiniMark.ARRAY_CLOSE.value:
            raise FormatError(f'Unterminated array literal {text}')
        return Value([parse_literal(i) for i in _split_items(text[1:-1])])

    lower = text.lower()
    if lower in TRUE_WORDS:
        return Value(True)
    if lower in FALSE_WORDS:
        return Value(False)
    if (num := parse_number(text)) is not None:
        return Value(num)
    return Value(text)


def count_markers(line: str) -> int:
    return len(line) - len(line.lstrip(YiniMark.SECTION.value))


class YiniParser(FileHandler[Section]):
    """Owns a YINI tree (`self.root`), and reads/writes it.

    ```yini
    name = 'demo'       // pairs before any header go to root.

    ^ server
        ^^ connection   // nested in `server`
        port = 8080
    ```

    Each `parse_string()` or `read()` replaces the whole tree,
    unless `merge=True` or `readfiles()`, which add to it.
    """
    def __init__(
        self, filename: str = '', encoding: str | None = None, *,
        strict_depth: bool = False
    ) -> None:
        """`strict_depth` rejects headers skipping a level,
        like `^^^` right after `^`. They nest under `^` by default."""
        super().__init__(filename)
        self._codec = encoding
        self._strict_depth = strict_depth
        self.root = Section()

    @staticmethod
    def readstream(
        buf: str | TextIOBase,
        ins: Section | None = None, *,
        strict_depth: bool = False
    ) -> Section:
        """Parse YINI text (or a decoded stream) into `ins`.

        A new `Section` is created if `ins` is None.
        `ins` is NOT cleared, so this is also the way to merge.
        """
        if ins is None:
            ins = Section()
        content = buf if isinstance(buf, str) else buf.read()
        cleaned, linemap = _strip_block_comments(content)

        stack: list[str] = []
        this_sect = ins
        for lineno, raw in zip(linemap, cleaned.split('\n')):
            if not (line := strip_line_comment(raw).strip()):
                continue
            try:
                this_sect = YiniParser.__readline(
                    line, ins, this_sect, stack, strict_depth)
            except FormatError as e:
                raise FormatError(e.reason, lineno, raw.rstrip('\r')) from None
            except InvalidNameError as e:
                raise FormatError(str(e), lineno, raw.rstrip('\r')) from None
        return ins

    @staticmethod
    def __readline(
        line: str, ins: Section, this_sect: Section,
        stack: list[str], strict_depth: bool
    ) -> Section:
        # returns the section that following pairs go to.
        if (depth := count_markers(line)) > 0:
            if not (name := line[depth:].strip()):
                raise FormatError('Empty section name')
            if strict_depth and depth > len(stack) + 1:
                raise FormatError(f'Section depth {depth} skips a level')
            del stack[depth - 1:]
            stack.append(name)
            this_sect = ins
            for i in stack:
                this_sect = this_sect.section(i)
            return this_sect

        key, eq, val = line.partition(YiniMark.ASSIGN.value)
        if not eq:
            raise FormatError('Invalid line format')
        if not (key := key.strip()):
            raise FormatError('Empty key')
        this_sect[key] = parse_literal(val.strip())
        return this_sect

    def parse_string(self, content: str, *, merge: bool = False) -> Section:
        """Parse into `self.root` and return it.

        On `FormatError` the tree is left empty, never half-parsed.
        """
        if not merge:
            self.root.clear()
        try:
            return self.readstream(
                content, self.root, strict_depth=self._strict_depth)
        except FormatError:
            self.root.clear()
            raise

    def write_string(
        self, *,
        indent: int = DEFAULT_INDENT, blank_lines: int = 1
    ) -> str:
        return serialize(self.root, indent=indent, blank_lines=blank_lines)

    @staticmethod
    def _decode_file(filename: str) -> str:
        try:
            with open(filename, 'rb') as fp:
                raw = fp.read()
        except OSError as e:
            raise FileError(f'Cannot open file: {filename}') from e

        codec = chardet.detect(raw)
        encoding = codec['encoding']
        if encoding is None or codec['confidence'] < 0.8:
            encoding = 'utf-8'

        # fallbacks
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logging.warning(
                f'`{filename}` is not {encoding}, try decoding as gbk.')
        try:
            return raw.decode('gbk')
        except UnicodeDecodeError as e:
            raise FileError(f'Cannot decode file: {filename}') from e

    def _load(self, filename: str) -> str:
        try:
            # when encoding is None, `open()` would fallback to system default.
            # and when encoding got wrong,
            # just `UnicodeDecodeError` and fallback to `chardet`.
            with open(filename, 'r', encoding=self._codec) as fp:
                return fp.read()
        except UnicodeDecodeError:
            return self._decode_file(filename)
        except OSError as e:
            raise FileError(f'Cannot open file: {filename}') from e

    def read(self) -> Section:
        """Read the file specified by this `YiniParser` instance."""
        return self.parse_string(self._load(self._fn))

    def readfiles(self, *paths: str) -> Section:
        """Read more YINI files into current tree, one by one.

        Later files win on duplicated keys, while sections get merged.
        """
        for i in paths:
            logging.info(f'Merging `{i}` into YINI tree.')
            self.parse_string(self._load(i), merge=True)
        return self.root

    def write(
        self, instance: Section | None = None, *,
        indent: int = DEFAULT_INDENT, blank_lines: int = 1
    ) -> None:
        """Save `instance` (`self.root` by default) to the file.

        Comments and original formatting are NOT kept.
        """
        text = serialize(
            self.root if instance is None else instance,
            indent=indent, blank_lines=blank_lines)
        try:
            with open(self._fn, 'w', encoding=self._codec or 'utf-8') as fp:
                fp.write(text)
        except OSError as e:
            raise FileError(f'Cannot write to file: {self._fn}') from e

    # convenience, just like `self.root[...]`.
    def __getitem__(self, key: str) -> Value:
        return self.root[key]

    def __setitem__(self, key: str, value: object) -> None:
        self.root[key] = value

    def section(self, name: str) -> Section:
        return self.root.section(name)

    def __str__(self) -> str:
        return "YINI file: " + super().__str__() + f" ({self._codec})"


def parse(content: str, *, strict_depth: bool = False) -> Section:
    """Parse YINI text into a new tree."""
    return YiniParser.readstream(content, strict_depth=strict_depth)
