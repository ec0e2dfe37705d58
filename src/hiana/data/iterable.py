"""Iterable views over object containers.

Provides an interface to iterate over the objects of an object container
(tracks, clusters, ...), either over all objects or only over the objects
which pass the acceptance cuts of the container. The content is specified
when the view is built.

Views should not be created by hand. The containers provide the
functionality to create them for both cases:

.. code-block:: python

    accepted = container.accepted()  # Iterable over accepted entries
    everything = container.all()     # Iterable over all entries

    for track in accepted:
        ...

    it = accepted.begin()
    while it != accepted.end():
        track = it.deref()
        it.increment()

A view does not own the container it was built from and never modifies it.
The list of accepted indexes is built once, when the view is created: if the
content of the container changes afterwards, the view is stale and must be
rebuilt (see :attr:`IterableContainer.is_stale`).
"""

from copy import copy
from typing import Iterator, Optional, Protocol, Tuple, TypeVar, Generic

import numpy as np

__all__ = [
    "BackingCollection",
    "build_accept_indices",
    "IterableContainer",
    "ContainerIterator",
]

T = TypeVar("T")


class BackingCollection(Protocol[T]):
    """Interface of the containers which can be viewed by an iterable."""

    def get_n_entries(self) -> int:
        """Total number of objects in the container."""

    def get_n_accept_entries(self) -> int:
        """Expected number of accepted objects (only used for sizing)."""

    def accept_object(self, index: int) -> Tuple[bool, int]:
        """Whether the object at `index` is accepted, and the rejection reason."""

    def __getitem__(self, index: int) -> T:
        """Object at position `index` in the container."""


def build_accept_indices(container):
    """Build the list of indexes of the accepted objects of a container.

    The index buffer is pre-sized with the number of accepted entries the
    container reports, then trimmed (or grown) to the number of objects which
    actually pass the acceptance check.

    Parameters
    ----------
    container : BackingCollection
        Container to scan

    Returns
    -------
    np.ndarray
        (K) Increasing list of positions of the accepted objects
    """
    num_entries = container.get_n_entries()
    indices = np.empty(max(container.get_n_accept_entries(), 0), dtype=np.int64)
    count = 0
    for index in range(num_entries):
        accepted, _ = container.accept_object(index)
        if not accepted:
            continue

        # The expected number of accepted entries is only a hint
        if count == len(indices):
            indices = np.resize(indices, max(2 * count, 1))
        indices[count] = index
        count += 1

    return indices[:count].copy()


class IterableContainer(Generic[T]):
    """View over the objects of a container.

    Attributes
    ----------
    use_accepted : bool
        Whether the view runs over the accepted objects only
    accept_indices : np.ndarray
        (K) Positions of the accepted objects in the container (only
        filled when `use_accepted` is `True`)
    """

    def __init__(self, container, use_accepted):
        """Build the view, scan the container if needed.

        Parameters
        ----------
        container : BackingCollection
            Container to iterate over. It must outlive the view.
        use_accepted : bool
            If `True`, the view only exposes accepted objects, otherwise all
            the objects of the container
        """
        self._container = container
        self.use_accepted = bool(use_accepted)
        self.accept_indices = np.empty(0, dtype=np.int64)
        self._generation = getattr(container, "generation", None)
        if self.use_accepted:
            self.accept_indices = build_accept_indices(container)

    def __copy__(self):
        """Copy the view, the index map is duplicated, not the container."""
        other = self.__class__.__new__(self.__class__)
        other.__dict__.update(self.__dict__)
        other.accept_indices = self.accept_indices.copy()

        return other

    def get_container(self):
        """Returns the underlying container."""
        return self._container

    def get_entries(self):
        """Number of objects in the view.

        Returns
        -------
        int
            Number of accepted objects if the view runs over accepted
            objects, total number of objects in the container otherwise
        """
        if self.use_accepted:
            return len(self.accept_indices)

        return self._container.get_n_entries()

    def __len__(self):
        return self.get_entries()

    def __int__(self):
        return self.get_entries()

    def __getitem__(self, index) -> Optional[T]:
        """Object at a given logical position in the view.

        If the view runs over accepted objects, `index` refers to the n-th
        accepted object, ignoring the rejected objects in between. Otherwise
        it refers to the n-th object of the container.

        Parameters
        ----------
        index : int
            Logical position of the object in the view

        Returns
        -------
        object
            Object at the given position (`None` if out of range)
        """
        if index < 0 or index >= self.get_entries():
            return None

        if self.use_accepted:
            return self._container[int(self.accept_indices[index])]

        return self._container[index]

    def element_at(self, index):
        """Alias of the index operator."""
        return self[index]

    @property
    def is_stale(self):
        """Whether the container was modified after the view was built.

        Only containers which expose a `generation` counter can be checked,
        the view is assumed to be valid otherwise.
        """
        if self._generation is None:
            return False

        return getattr(self._container, "generation", None) != self._generation

    def begin(self):
        """Forward iterator on the first entry."""
        return ContainerIterator(self, 0, True)

    def end(self):
        """Forward iterator behind the last entry."""
        return ContainerIterator(self, self.get_entries(), True)

    def rbegin(self):
        """Backward iterator on the last entry."""
        return ContainerIterator(self, self.get_entries() - 1, False)

    def rend(self):
        """Backward iterator before the first entry."""
        return ContainerIterator(self, -1, False)

    def __iter__(self) -> Iterator[T]:
        it, end = self.begin(), self.end()
        while it != end:
            yield it.deref()
            it.increment()

    def __reversed__(self) -> Iterator[T]:
        it, end = self.rbegin(), self.rend()
        while it != end:
            yield it.deref()
            it.increment()

    def __repr__(self):
        mode = "accepted" if self.use_accepted else "all"
        return (
            f"{self.__class__.__name__}(container="
            f"{self._container.__class__.__name__}, mode={mode}, "
            f"entries={self.get_entries()})"
        )


class ContainerIterator:
    """Bidirectional position cursor over an :class:`IterableContainer`.

    The cursor holds a logical position in the view and a direction. It can
    move past the ends of the view, in which case dereferencing it returns
    `None`. Two cursors are equal when their positions are equal, regardless
    of their direction or of the view they run on.

    Attributes
    ----------
    position : int
        Current logical position in the view
    forward : bool
        Direction of the iteration
    """

    def __init__(self, data, position, forward=True):
        """Initialize the cursor.

        Cursors should be built with the `begin`, `end`, `rbegin` and `rend`
        methods of the view.

        Parameters
        ----------
        data : IterableContainer
            View to iterate over
        position : int
            Starting position of the cursor
        forward : bool, default True
            If `True`, incrementing moves towards the end of the view,
            otherwise towards its beginning
        """
        self._data = data
        self.position = position
        self.forward = forward

    def __copy__(self):
        return ContainerIterator(self._data, self.position, self.forward)

    def __eq__(self, other):
        if not isinstance(other, ContainerIterator):
            return NotImplemented

        return self.position == other.position

    def __ne__(self, other):
        if not isinstance(other, ContainerIterator):
            return NotImplemented

        return self.position != other.position

    __hash__ = None

    def increment(self):
        """Move the cursor one step in its direction (prefix increment).

        Returns
        -------
        ContainerIterator
            This cursor, after the move
        """
        self.position += 1 if self.forward else -1
        return self

    def decrement(self):
        """Move the cursor one step against its direction (prefix decrement).

        Returns
        -------
        ContainerIterator
            This cursor, after the move
        """
        self.position += -1 if self.forward else 1
        return self

    def post_increment(self):
        """Move the cursor in its direction, return its previous state."""
        previous = copy(self)
        self.increment()
        return previous

    def post_decrement(self):
        """Move the cursor against its direction, return its previous state."""
        previous = copy(self)
        self.decrement()
        return previous

    def deref(self):
        """Object at the current position (`None` if out of range)."""
        return self._data[self.position]

    def __repr__(self):
        direction = "forward" if self.forward else "backward"
        return f"ContainerIterator(position={self.position}, {direction})"
