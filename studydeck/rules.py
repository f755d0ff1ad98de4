"""Literal rule tables used by the heuristic generator.

Order matters: rules are applied top to bottom and a later rule may rewrite
text produced by an earlier one (``insufficient`` becomes ``inenough``).
"""

from __future__ import annotations

import re

from studydeck.schemas import CardType, Difficulty, Flashcard

# Matched case-insensitively, reported lowercased.
TECHNICAL_TERMS: tuple[str, ...] = (
    "algorithm", "api", "database", "framework", "function", "method", "object", "class",
    "variable", "loop", "condition", "array", "string", "integer", "boolean", "null",
    "undefined", "callback", "promise", "async", "await", "module", "package", "library",
    "dependency", "version", "deployment", "production", "development", "testing",
    "debugging", "optimization", "performance", "security", "authentication", "authorization",
    "encryption", "compression", "caching", "scaling", "microservices", "monolith",
    "frontend", "backend", "fullstack", "responsive", "accessibility", "seo",
)

PROGRAMMING_CONCEPTS: tuple[str, ...] = (
    "Object-Oriented Programming", "Functional Programming", "Procedural Programming",
    "Event-Driven Programming", "Reactive Programming", "Declarative Programming",
    "Imperative Programming", "SOLID Principles", "DRY Principle", "KISS Principle",
    "Design Patterns", "Data Structures", "Algorithms", "Big O Notation",
    "Memory Management", "Garbage Collection", "Threading", "Concurrency",
    "Asynchronous Programming", "Error Handling", "Logging", "Monitoring",
)

# (label, indicator substrings) checked in order after the vocabulary tests.
TOPIC_INDICATORS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("APIs", ("api", "endpoint")),
    ("Databases", ("database", "sql", "query")),
    ("Frontend Frameworks", ("react", "vue", "angular")),
    ("Backend Development", ("node", "express", "server")),
    ("Testing", ("test", "testing", "unit")),
    ("Deployment", ("deploy", "production", "hosting")),
    ("Security", ("security", "authentication", "encryption")),
)

STOP_WORDS: frozenset[str] = frozenset(
    """
    this that with have will from they know want been good much some time very when come
    just into than more other about many then them these people only well also over still
    take every think here again another around because before should through during first
    going great might never often place right small sound their there those under until
    water where which while world years after being could found having large learn
    """.split()
)

SIMPLIFY_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"utilizes?", "uses"),
        (r"initialization", "starting"),
        (r"implementation", "how it works"),
        (r"functionality", "feature"),
        (r"methodology", "method"),
        (r"individuals?", "people"),
        (r"commonly", "often"),
        (r"in order to", "to"),
        (r"prior to", "before"),
        (r"subsequent", "next"),
        (r"obtain", "get"),
        (r"demonstrates?", "shows"),
        (r"approximately", "about"),
        (r"assistance", "help"),
        (r"modification", "change"),
        (r"numerous", "many"),
        (r"various", "different"),
        (r"indicates?", "shows"),
        (r"facilitates?", "helps"),
        (r"commences?", "starts"),
        (r"terminates?", "ends"),
        (r"subsequently", "then"),
        (r"consequently", "so"),
        (r"therefore", "so"),
        (r"additionally", "also"),
        (r"sufficient", "enough"),
        (r"insufficient", "not enough"),
        (r"advantageous", "helpful"),
        (r"disadvantageous", "not helpful"),
        (r"frequently", "often"),
        (r"prior", "before"),
    )
)

SHORT_DEFINITIONS: dict[str, str] = {
    "api": "Interface for software communication",
    "function": "Reusable code block",
    "variable": "Data storage container",
    "class": "Object blueprint",
    "method": "Class function",
    "object": "Class instance",
    "array": "Ordered data collection",
    "string": "Text sequence",
    "database": "Structured data storage",
    "framework": "Development foundation",
    "algorithm": "Problem-solving steps",
    "loop": "Repeated execution",
    "condition": "Decision logic",
    "callback": "Function reference",
    "promise": "Async operation result",
    "module": "Code organization unit",
    "package": "Dependency bundle",
    "library": "Reusable code collection",
    "dependency": "Required external code",
    "deployment": "Application release",
    "testing": "Code verification",
    "debugging": "Error fixing",
    "optimization": "Performance improvement",
    "security": "Protection measures",
    "authentication": "User verification",
    "encryption": "Data protection",
    "caching": "Temporary storage",
    "scaling": "Performance expansion",
    "frontend": "User interface",
    "backend": "Server logic",
    "responsive": "Adaptive design",
    "accessibility": "Universal access",
    "seo": "Search optimization",
}

LONG_DEFINITIONS: dict[str, str] = {
    "api": "An Application Programming Interface (API) is a set of rules and protocols that allows different software applications to communicate with each other.",
    "function": "A function is a reusable block of code that performs a specific task and can be called from other parts of the program.",
    "variable": "A variable is a container that stores data values and can be referenced and manipulated throughout a program.",
    "class": "A class is a blueprint for creating objects that defines their properties and methods.",
    "method": "A method is a function that belongs to a class or object and defines the behavior of that class or object.",
    "object": "An object is an instance of a class that contains data and code to manipulate that data.",
    "array": "An array is a data structure that stores a collection of elements in a specific order.",
    "string": "A string is a sequence of characters used to represent text in programming.",
    "database": "A database is an organized collection of structured information or data stored electronically.",
    "framework": "A framework is a pre-built structure that provides a foundation for developing applications.",
}


def _fallback(idx: int, question: str, answer: str, card_type: CardType, difficulty: Difficulty, tag: str) -> Flashcard:
    return Flashcard(
        id=f"fallback_{idx}",
        question=question,
        answer=answer,
        type=card_type,
        difficulty=difficulty,
        tags=[tag, "fallback"],
        readingTime="3 sec",
    )


FALLBACK_FLASHCARDS: tuple[Flashcard, ...] = (
    _fallback(
        1,
        "What is this page about?",
        "This page contains general information relevant to the user. The content has been extracted but could not be automatically summarized.",
        CardType.concept,
        Difficulty.easy,
        "general",
    ),
    _fallback(
        2,
        "What can the user do with this tool?",
        "Extract text from web pages, summarize content, generate flashcards for learning, and review them in a voice session.",
        CardType.concept,
        Difficulty.easy,
        "tool",
    ),
    _fallback(
        3,
        "How does text extraction work?",
        "Main content areas are identified, navigation elements removed, and clean text extracted while avoiding ads, footers, and sidebars.",
        CardType.process,
        Difficulty.medium,
        "extraction",
    ),
    _fallback(
        4,
        "What types of content can be processed?",
        "Articles, documentation, tutorials, blog posts, and any text-based content. Structured, informative content works best.",
        CardType.fact,
        Difficulty.easy,
        "content",
    ),
    _fallback(
        5,
        "How can I hear the flashcards read aloud?",
        "Start a voice session to have each question spoken, then answer out loud with a single word.",
        CardType.process,
        Difficulty.easy,
        "speech",
    ),
    _fallback(
        6,
        "What are the different flashcard types?",
        "Definition cards explain terms, concept cards cover ideas, fact cards present information, and process cards describe how things work.",
        CardType.concept,
        Difficulty.medium,
        "flashcards",
    ),
)
