"""Demo verse data for offline use.

Verse rows for a handful of books in the DEMO version: every chapter of
Genesis and John (verse numbers only) and the text of Psalm 23.
"""

DEMO_VERSION = "DEMO"

# book_id -> verses per chapter, chapter 1 first
DEMO_VERSE_COUNTS: dict[int, list[int]] = {
    # Genesis
    1: [
        31, 25, 24, 26, 32, 22, 24, 22, 29, 32,
        32, 20, 18, 24, 21, 16, 27, 33, 38, 18,
        34, 24, 20, 67, 34, 35, 46, 22, 35, 43,
        55, 32, 20, 31, 29, 43, 36, 30, 23, 23,
        57, 38, 34, 34, 28, 34, 31, 22, 33, 26,
    ],
    # John
    43: [
        51, 25, 36, 54, 47, 71, 53, 59, 41, 42,
        57, 50, 38, 31, 27, 33, 26, 40, 42, 31,
        25,
    ],
}

# (book_id, chapter, verse, text)
DEMO_VERSES: list[tuple[int, int, int, str]] = [
    (19, 23, 1, "The LORD is my shepherd; I shall not want."),
    (
        19,
        23,
        2,
        "He maketh me to lie down in green pastures: "
        "he leadeth me beside the still waters.",
    ),
    (
        19,
        23,
        3,
        "He restoreth my soul: he leadeth me in the paths of "
        "righteousness for his name's sake.",
    ),
    (
        19,
        23,
        4,
        "Yea, though I walk through the valley of the shadow of death, "
        "I will fear no evil: for thou art with me; "
        "thy rod and thy staff they comfort me.",
    ),
    (
        19,
        23,
        5,
        "Thou preparest a table before me in the presence of mine enemies: "
        "thou anointest my head with oil; my cup runneth over.",
    ),
    (
        19,
        23,
        6,
        "Surely goodness and mercy shall follow me all the days of my life: "
        "and I will dwell in the house of the LORD for ever.",
    ),
]
