"""Domain reference resolution — pure functions, zero external dependencies.

Trips point at trucks and drivers by id. Rows imported from the historical
spreadsheets use legacy ids built from a display value instead
(``truck_8565_TU_257``, ``driver_LASSAD_AMRI``); those resolve by matricule
or by name.

Only stdlib imports allowed.
"""

LEGACY_TRUCK_PREFIX = "truck_"
LEGACY_DRIVER_PREFIX = "driver_"


def legacy_value(ref, prefix):
    """Decode a legacy id into its display value, or None if ``ref`` is not legacy."""
    if not ref or not ref.startswith(prefix):
        return None
    return ref[len(prefix):].replace("_", " ")


class ReferenceIndex:
    """Id lookup with a legacy display-value fallback.

    Items keep their input order in ``values()``.
    """

    def __init__(self, items, legacy_attr, legacy_prefix):
        self._items = list(items)
        self._by_id = {}
        self._by_legacy = {}
        for item in self._items:
            self._by_id.setdefault(item.id, item)
            self._by_legacy.setdefault(getattr(item, legacy_attr), item)
        self._prefix = legacy_prefix

    def get(self, ref):
        if ref is None:
            return None
        if ref in self._by_id:
            return self._by_id[ref]
        legacy = legacy_value(ref, self._prefix)
        if legacy is not None:
            return self._by_legacy.get(legacy)
        return None

    def values(self):
        return list(self._items)

    def __contains__(self, ref):
        return self.get(ref) is not None

    def __len__(self):
        return len(self._items)


def index_camions(camions):
    """Index trucks by id, with matricule fallback for legacy ids."""
    if isinstance(camions, ReferenceIndex):
        return camions
    return ReferenceIndex(camions, "matricule", LEGACY_TRUCK_PREFIX)


def index_chauffeurs(chauffeurs):
    """Index drivers by id, with name fallback for legacy ids."""
    if isinstance(chauffeurs, ReferenceIndex):
        return chauffeurs
    return ReferenceIndex(chauffeurs, "nom", LEGACY_DRIVER_PREFIX)


def driver_name(chauffeurs, ref, default="Inconnu"):
    chauffeur = index_chauffeurs(chauffeurs).get(ref)
    return chauffeur.nom if chauffeur else default


def canonical_id(index, ref):
    """Id of the record ``ref`` designates, or ``ref`` itself when unresolved."""
    item = index.get(ref)
    return item.id if item is not None else ref
