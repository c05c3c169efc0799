import gzip
import io
import itertools
import logging
import lzma
import os
from collections.abc import Sized

logger = logging.getLogger(__name__)

OPENERS = {
    '.txt': open,
    '.gz': gzip.open,
    '.xz': lzma.open,
}


def has_length(values):
    return isinstance(values, Sized)


def peek(iterable):
    """Check an iterable for emptiness without losing its first element.

    Returns ``(is_empty, iterator)``; the iterator yields every element,
    the peeked one included.
    """
    it = iter(iterable)
    try:
        first = next(it)
    except StopIteration:
        return True, iter(())
    return False, itertools.chain([first], it)


class ValueLoader(object):
    """Lazily read numbers from text files, plain or compressed.

    ``path`` is a file or a directory; directories are walked and every
    ``.txt``, ``.gz`` and ``.xz`` file is read in sorted order. Each
    whitespace separated token is converted with ``parse``. Blank lines and
    lines starting with ``#`` are skipped.

    The loader has no length, it is a forward-only sequence that can be
    iterated again from the start.
    """

    def __init__(self, path, parse=float, encoding='utf-8'):
        self.path = path
        self.parse = parse
        self.encoding = encoding

        self.input_files = []

        if os.path.isdir(path):
            for root, __, files in os.walk(path):
                for f in files:
                    __, ext = os.path.splitext(f)
                    if ext in OPENERS:
                        self.input_files.append(os.path.join(root, f))
            self.input_files.sort()
        else:
            self.input_files.append(path)

    def __iter__(self):
        return self.get_data()

    def get_data(self):
        def read():
            total = len(self.input_files)
            for i, input_file in enumerate(self.input_files):
                logger.debug("Reading file %s/%s: %s", i + 1, total, input_file)
                yield self.read_file(input_file)
        return itertools.chain.from_iterable(read())

    def read_file(self, input_file):
        __, ext = os.path.splitext(input_file)
        opener = OPENERS.get(ext, open)
        with opener(input_file, 'rb') as raw:
            with io.TextIOWrapper(raw, encoding=self.encoding) as f:
                for lineno, line in enumerate(f, 1):
                    line = line.strip()
                    if not line or line.startswith('#'):
                        continue
                    for token in line.split():
                        try:
                            yield self.parse(token)
                        except (TypeError, ValueError, ArithmeticError) as e:
                            raise ValueError(
                                "%s:%d: cannot parse %r" % (input_file, lineno, token)
                            ) from e
