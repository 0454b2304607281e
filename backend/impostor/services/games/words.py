import random
from typing import Iterable, Iterator, Optional

DEFAULT_WORDS = (
    'casa', 'cane', 'albero', 'fiore', 'libro', 'tavolo', 'sedia', 'sole', 'luna', 'stella',
    'acqua', 'aria', 'terra', 'fuoco', 'pioggia', 'neve', 'gatto', 'topo', 'uccello', 'pesce',
    'pane', 'latte', 'zucchero', 'sale', 'frutta', 'verdura', 'scuola', 'lavoro', 'strada', 'città',
    'montagna', 'mare', 'fiume', 'ponte', 'auto', 'treno', 'aereo', 'nave', 'orologio', 'telefono',
    'gioco', 'musica', 'film', 'sport', 'amico', 'famiglia', 'tempo', 'denaro', 'carta', 'penna',
)


class WordBank:
    """Immutable pool of candidate secret words."""

    def __init__(self, words: Iterable[str]):
        cleaned = tuple(w.strip() for w in words if w and w.strip())
        if not cleaned:
            raise ValueError('Word bank must contain at least one word')
        self._words = cleaned

    @classmethod
    def from_config(cls, config) -> 'WordBank':
        return cls(config.get('WORD_LIST') or DEFAULT_WORDS)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def pick(self, rng: Optional[random.Random] = None) -> str:
        return (rng or random).choice(self._words)
