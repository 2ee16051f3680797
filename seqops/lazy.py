import itertools

from seqops import ops as sequence_ops


class LazyCollection:
    """
    A chainable, lazy view over a sequence. Operations are recorded and
    applied only when you iterate, with the same semantics as the eager
    functions in seqops.ops. The source is never mutated. Optionally
    supports caching of realized results.
    """
    def __init__(self, source, ops=None, cache_enabled=False):
        self._source = source
        self._ops = ops or []          # sequence of ("op_name", arg)
        self._cache_enabled = cache_enabled
        self._cache = []               # realized items (post-ops)
        self._exhausted = False        # whether we've fully iterated (when caching)
        self._iterator = None          # live pipeline feeding the cache

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._with_op(("map", fn))

    def map_indexed(self, fn):
        return self._with_op(("map_indexed", fn))

    def filter(self, pred):
        return self._with_op(("filter", pred))

    def limit(self, n):
        return self._with_op(("limit", int(n)))

    def take(self, n):
        """Alias for limit()"""
        return self.limit(n)

    def skip(self, n):
        return self._with_op(("skip", int(n)))

    def batch(self, size):
        return self._with_op(("batch", int(size)))

    def chunk(self, size):
        """Alias for batch() - groups elements into chunks of specified size"""
        return self.batch(size)

    def unique(self):
        return self._with_op(("unique", None))

    def delete(self, value):
        return self._with_op(("delete", value))

    def reverse(self):
        """Reverse the upstream results (materializes them on iteration)"""
        return self._with_op(("reverse", None))

    def shuffle(self, rng=None):
        """Shuffle the upstream results (materializes them on iteration)"""
        return self._with_op(("shuffle", rng))

    def page(self, page_number, page_size):
        """Get a specific page of results (1-indexed).

        An uncached collection re-reads its source for every page, so
        one-shot sources (generators, iterators) should be cached first;
        pages of a cached collection are served from the shared cache.
        """
        if page_number < 1:
            raise ValueError("Page number must be >= 1")
        offset = (page_number - 1) * page_size
        if self._cache_enabled:
            return LazyCollection(_Window(self, max(offset, 0), max(offset + page_size, 0)))
        return self.skip(offset).limit(page_size)

    def paginate(self, page_size):
        """Return an iterator of pages, each containing up to page_size elements"""
        # One pass over the pipeline, cut into pages
        yield from _batched(iter(self), page_size)

    def cache(self, enabled=True):
        c = self._clone()
        c._cache_enabled = enabled
        return c

    # --------- forcing evaluation ----------
    def to_list(self):
        return list(self)

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn, initial):
        """Left fold of the results, starting from initial"""
        return sequence_ops.reduce(self, initial, fn)

    def sum(self, start=0):
        """Return the sum of all elements"""
        return sequence_ops.reduce(self, start, lambda acc, item: acc + item)

    def count(self):
        """Return the count of elements"""
        return sequence_ops.reduce(self, 0, lambda acc, _: acc + 1)

    def any(self, pred=None):
        """Return True if any element is truthy (or satisfies predicate)"""
        return sequence_ops.any_match(self, pred or bool)

    def all(self, pred=None):
        """Return True if all elements are truthy (or satisfy predicate)"""
        return sequence_ops.all_match(self, pred or bool)

    def first(self, pred=None, default=None):
        """Return (element, found) for the first element matching pred"""
        return sequence_ops.first(self, pred or (lambda _: True), default)

    def find(self, pred, default=None):
        """Return the first element that satisfies the predicate, or default"""
        item, _ = self.first(pred, default)
        return item

    # --------- iterator protocol ----------
    def __iter__(self):
        if not self._cache_enabled:
            yield from self._pipeline()
            return

        # Every pass reads the cache by position and pulls anything new from
        # one live pipeline, so sources and steps run exactly once.
        position = 0
        while True:
            if position < len(self._cache):
                yield self._cache[position]
                position += 1
                continue
            if self._exhausted:
                return
            if self._iterator is None:
                self._iterator = self._pipeline()
            try:
                item = next(self._iterator)
            except StopIteration:
                self._exhausted = True
                self._iterator = None
                return
            self._cache.append(item)
            position += 1
            yield item

    # --------- helpers ----------
    def _pipeline(self):
        it = iter(self._source)
        for op, arg in self._ops:
            if op == "map":
                it = map(arg, it)
            elif op == "map_indexed":
                fn = arg
                it = (fn(i, x) for i, x in enumerate(it))
            elif op == "filter":
                it = filter(arg, it)
            elif op == "limit":
                it = itertools.islice(it, max(arg, 0))
            elif op == "skip":
                it = itertools.islice(it, max(arg, 0), None)
            elif op == "batch":
                it = _batched(it, arg)
            elif op == "unique":
                it = _unique(it)
            elif op == "delete":
                value = arg
                it = (x for x in it if x != value)
            elif op == "reverse":
                it = _materialized(it, sequence_ops.reverse)
            elif op == "shuffle":
                rng = arg
                it = _materialized(it, lambda items, rng=rng: sequence_ops.shuffle(items, rng))
            else:
                raise ValueError(f"Unknown op: {op}")
        return it

    def _with_op(self, op_tuple):
        return LazyCollection(self._source, self._ops + [op_tuple], self._cache_enabled)

    def _clone(self):
        # Cache is not shared when cloning via .cache(); each pipeline gets its own
        return LazyCollection(self._source, list(self._ops), self._cache_enabled)


def _batched(gen, size):
    if size <= 0:
        return
    bucket = []
    for x in gen:
        bucket.append(x)
        if len(bucket) == size:
            yield bucket
            bucket = []
    if bucket:
        yield bucket


def _unique(gen):
    seen = set()
    kept = []   # unhashable values, compared by equality
    for x in gen:
        try:
            if x in seen:
                continue
            seen.add(x)
        except TypeError:
            if x in kept:
                continue
            kept.append(x)
        yield x


class _Window:
    """Replayable [start, stop) slice of a cached collection"""
    def __init__(self, collection, start, stop):
        self._collection = collection
        self._start = start
        self._stop = stop

    def __iter__(self):
        return itertools.islice(self._collection, self._start, self._stop)


def _materialized(gen, apply_in_place):
    items = list(gen)
    apply_in_place(items)
    yield from items
