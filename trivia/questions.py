"""
Trivia questions and the question pool.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from trivia.exceptions import InvalidQuestionError

OPTION_COUNT = 4


class Difficulty(Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Question:
    """A multiple choice question with exactly four ordered options."""

    text: str
    options: Tuple[str, ...]
    correct_index: int
    difficulty: Difficulty = Difficulty.MEDIUM
    is_bonus: bool = False

    def __post_init__(self):
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) != OPTION_COUNT:
            raise InvalidQuestionError(f"'{self.text}' has {len(self.options)} options, expected {OPTION_COUNT}")
        if not 0 <= self.correct_index < OPTION_COUNT:
            raise InvalidQuestionError(f"'{self.text}' has correct_index {self.correct_index}")

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_index

    def __repr__(self) -> str:
        return f"Question('{self.text}')"


def _by_difficulty(questions: Sequence[Question], *levels: Difficulty) -> List[Question]:
    return [q for q in questions if q.difficulty in levels]


class QuestionPool:
    """
    Remaining questions for the main game.

    Drawn questions move to ``used``. With ``recycle`` enabled (turn-based
    games) an empty pool is refilled from ``used`` and shuffled, so the game
    never runs dry. Without it an empty pool stays empty.
    """

    def __init__(self, questions: Iterable[Question], rng: random.Random, recycle: bool = True):
        self.master: Tuple[Question, ...] = tuple(questions)
        self.rng = rng
        self.recycle = recycle
        self.available: List[Question] = list(self.master)
        self.used: List[Question] = []
        self.recycle_count = 0

    @property
    def is_exhausted(self) -> bool:
        return not self.available

    def reset(self) -> None:
        """Put every question back, as at the start of a game."""
        self.available = list(self.master)
        self.used.clear()
        self.recycle_count = 0

    def _recycle_if_needed(self) -> bool:
        if not self.recycle or self.available or not self.used:
            return False
        self.available.extend(self.used)
        self.used.clear()
        self.rng.shuffle(self.available)
        self.recycle_count += 1
        return True

    def _take(self, candidates: List[Question]) -> Question:
        chosen = self.rng.choice(candidates)
        self.available.remove(chosen)
        self.used.append(chosen)
        return chosen

    def draw_regular(self) -> Optional[Question]:
        """
        Draw a question for a question tile.

        Prefers easy/medium non-bonus questions, then any non-bonus question,
        then anything left.
        """
        self._recycle_if_needed()
        if not self.available:
            return None
        regular = [q for q in self.available if not q.is_bonus]
        source = _by_difficulty(regular, Difficulty.EASY, Difficulty.MEDIUM) or regular or self.available
        return self._take(source)

    def draw_bonus(self) -> Optional[Question]:
        """Draw a bonus question, hardest first. None if no bonus question is left."""
        self._recycle_if_needed()
        bonus = [q for q in self.available if q.is_bonus]
        if not bonus:
            return None
        source = _by_difficulty(bonus, Difficulty.HARD) or _by_difficulty(bonus, Difficulty.MEDIUM) or bonus
        return self._take(source)

    def draw_sudden_death(self, exclude: Sequence[Question] = ()) -> Optional[Question]:
        """
        Pick a tie-break question from the full question list.

        Does not touch the main pool. Hard questions are preferred and
        questions in ``exclude`` are avoided while alternatives exist.
        """
        if not self.master:
            return None
        fresh = [q for q in self.master if q not in exclude] or list(self.master)
        source = _by_difficulty(fresh, Difficulty.HARD) or fresh
        return self.rng.choice(source)


def create_question_bank() -> List[Question]:
    """Create the standard Turkish literature question set."""
    easy, medium, hard = Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD
    return [
        Question(
            "Which is the first novel of Turkish literature?",
            ("Taaşşuk-ı Talat ve Fitnat", "Araba Sevdası", "İntibah", "Zehra"),
            0,
            easy,
        ),
        Question(
            "Which of these works was written by Namık Kemal?",
            ("İntibah", "Araba Sevdası", "Zehra", "Taaşşuk-ı Talat ve Fitnat"),
            0,
            easy,
        ),
        Question(
            "Which is the first example of the short story in Turkish literature?",
            ("Küçük Şeyler", "Letâif-i Rivâyet", "Hikâye-i Güzide", "Müsameretnâme"),
            1,
            medium,
        ),
        Question(
            "Who wrote the novel 'Çalıkuşu'?",
            ("Reşat Nuri Güntekin", "Halide Edib Adıvar", "Yakup Kadri Karaosmanoğlu", "Peyami Safa"),
            0,
            easy,
        ),
        Question(
            "Who wrote 'Kuyucaklı Yusuf'?",
            ("Sait Faik Abasıyanık", "Sabahattin Ali", "Orhan Kemal", "Kemal Tahir"),
            1,
            easy,
        ),
        Question(
            "Who is the author of 'Aşk-ı Memnu'?",
            ("Mehmet Rauf", "Recaizade Mahmut Ekrem", "Halit Ziya Uşaklıgil", "Ahmet Mithat Efendi"),
            2,
            easy,
        ),
        Question(
            "Which is the first Turkish play written for the stage?",
            ("Vatan yahut Silistre", "Şair Evlenmesi", "Zavallı Çocuk", "Akif Bey"),
            1,
            medium,
        ),
        Question(
            "Which was the first private Turkish newspaper?",
            ("Takvim-i Vekayi", "Tasvir-i Efkâr", "Tercüman-ı Ahvâl", "Ceride-i Havadis"),
            2,
            medium,
        ),
        Question(
            "Who wrote 'Les Misérables' ('Sefiller')?",
            ("Émile Zola", "Honoré de Balzac", "Gustave Flaubert", "Victor Hugo"),
            3,
            easy,
        ),
        Question(
            "Who wrote 'Tutunamayanlar'?",
            ("Oğuz Atay", "Yusuf Atılgan", "Bilge Karasu", "Adalet Ağaoğlu"),
            0,
            medium,
        ),
        Question(
            "What is the literary device of likening one thing to another called?",
            ("Teşbih", "Mübalağa", "Tezat", "Tecahül-i Arif"),
            0,
            easy,
        ),
        Question(
            "Giving human traits to non-human beings is called:",
            ("Tenasüp", "Teşhis", "Telmih", "Kinaye"),
            1,
            medium,
        ),
        Question(
            "Describing something far beyond its real extent is called:",
            ("Tariz", "İstiare", "Mübalağa", "Hüsn-i Talil"),
            2,
            easy,
        ),
        Question(
            "Who am I? I wrote the novel 'Saatleri Ayarlama Enstitüsü'.",
            ("Ahmet Hamdi Tanpınar", "Peyami Safa", "Abdülhak Şinasi Hisar", "Tarık Buğra"),
            0,
            medium,
        ),
        Question(
            "Who am I? I wrote the novel 'Sinekli Bakkal'.",
            ("Halide Edib Adıvar", "Fatma Aliye", "Suat Derviş", "Sabiha Sertel"),
            0,
            easy,
        ),
        Question(
            "Who is the heroine of 'Çalıkuşu'?",
            ("Bihter", "Feride", "Nihal", "Zehra"),
            1,
            easy,
        ),
        Question(
            "Which character marries Adnan Bey in 'Aşk-ı Memnu'?",
            ("Firdevs Hanım", "Nihal", "Bihter", "Peyker"),
            2,
            medium,
        ),
        Question(
            "Who wrote 'İnce Memed'?",
            ("Orhan Kemal", "Yaşar Kemal", "Fakir Baykurt", "Kemal Tahir"),
            1,
            easy,
        ),
        Question(
            "Which writer is a leading short story author of the National Literature movement?",
            ("Ömer Seyfettin", "Hüseyin Cahit Yalçın", "Ahmet Haşim", "Cenap Şahabettin"),
            0,
            medium,
        ),
        Question(
            "Which of these authors belongs to the Servet-i Fünun period?",
            ("Halit Ziya Uşaklıgil", "Ömer Seyfettin", "Yakup Kadri Karaosmanoğlu", "Reşat Nuri Güntekin"),
            0,
            medium,
            True,
        ),
        Question(
            "Which movement embraced the principle 'art for art's sake'?",
            ("First Tanzimat generation", "Servet-i Fünun", "National Literature", "Garip"),
            1,
            medium,
            True,
        ),
        Question(
            "Who led the Garip (First New) poetry movement?",
            ("Nazım Hikmet", "Cemal Süreya", "Orhan Veli Kanık", "Attilâ İlhan"),
            2,
            medium,
            True,
        ),
        Question(
            "Which is the first realist novel of Turkish literature?",
            ("Araba Sevdası", "İntibah", "Taaşşuk-ı Talat ve Fitnat", "Zehra"),
            0,
            hard,
            True,
        ),
        Question(
            "Who is the protagonist of 'Araba Sevdası'?",
            ("Bihruz Bey", "Felatun Bey", "Rakım Efendi", "Ali Bey"),
            0,
            hard,
            True,
        ),
        Question(
            "Who wrote 'Crime and Punishment' ('Suç ve Ceza')?",
            ("Fyodor Dostoyevski", "Lev Tolstoy", "Anton Çehov", "Nikolay Gogol"),
            0,
            hard,
            True,
        ),
        Question(
            "Who wrote the dystopian novel '1984'?",
            ("George Orwell", "Aldous Huxley", "Ray Bradbury", "Philip K. Dick"),
            0,
            hard,
            True,
        ),
        Question(
            "Who is credited with the epics 'Iliad' and 'Odyssey'?",
            ("Hesiod", "Homer", "Virgil", "Sophocles"),
            1,
            hard,
            True,
        ),
    ]
