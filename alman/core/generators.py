# alman/core/generators.py
"""
Alias candidate generators.

Each generator is a pure function `command -> list[AliasSuggestion]` and
knows nothing about the others, about conflicts or about ranking. The engine
(alias_suggester.py) runs every function listed in GENERATORS.

Categories decide ranking later on; see CATEGORY_WEIGHTS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

VOWELS = set("aeiouAEIOU")

# category names
SEMANTIC = "semantic"
ABBREVIATION = "abbreviation"
VOWEL_REMOVAL = "vowel_removal"
COMBINATION = "combination"
SYLLABLE = "syllable"
AFFIX_STRIP = "affix_strip"
SINGLE_WORD = "single_word"
PHONETIC = "phonetic"
PATTERN_COLLAPSE = "pattern_collapse"
KEYBOARD = "keyboard"
TRUNCATION = "truncation"
EXECUTABLE = "executable"

# higher = shown first
CATEGORY_WEIGHTS: Dict[str, int] = {
    SEMANTIC: 100,
    ABBREVIATION: 90,
    VOWEL_REMOVAL: 80,
    COMBINATION: 70,
    SYLLABLE: 65,
    AFFIX_STRIP: 60,
    SINGLE_WORD: 55,
    PHONETIC: 50,
    PATTERN_COLLAPSE: 45,
    KEYBOARD: 40,
    TRUNCATION: 35,
    EXECUTABLE: 30,
}
DEFAULT_WEIGHT = 30


@dataclass(frozen=True)
class AliasSuggestion:
    alias: str
    command: str
    reason: str
    category: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {"alias": self.alias, "command": self.command, "reason": self.reason}


Generator = Callable[[str], List[AliasSuggestion]]


# small helpers ------------------------------------------------------------
def _words(command: str) -> List[str]:
    return command.split()


def _is_relative_path(tool: str) -> bool:
    return tool.startswith("./") or tool.startswith("../")


def _consonants(word: str) -> str:
    return "".join(c for c in word if c not in VOWELS)


# semantic tool tables ------------------------------------------------------
# subcommand -> (alias, reason)
DOCKER_ALIASES = {
    "ps": ("dps", "Docker ps"),
    "run": ("dr", "Docker run"),
    "build": ("db", "Docker build"),
    "exec": ("de", "Docker exec"),
    "rm": ("drm", "Docker rm"),
    "rmi": ("drmi", "Docker rmi"),
}

NPM_ALIASES = {
    "install": ("ni", "NPM install"),
    "run": ("nr", "NPM run"),
    "start": ("ns", "NPM start"),
    "test": ("nt", "NPM test"),
    "publish": ("np", "NPM publish"),
}

GIT_ALIASES = {
    "status": ("gs", "Git status"),
    "push": ("gp", "Git push"),
    "pull": ("gl", "Git pull"),
    "log": ("glg", "Git log"),
    "branch": ("gb", "Git branch"),
}


def _git_alias(sub: str, rest: Sequence[str]):
    if sub == "add":
        if rest and rest[0] == ".":
            return "gaa", "Git add all"
        return "ga", "Git add"
    if sub == "commit":
        if len(rest) >= 2 and rest[0] == "-m":
            return "gcm", "Git commit with message"
        return "gc", "Git commit"
    if sub == "checkout":
        if len(rest) >= 2 and rest[0] == "-b":
            return "gcb", "Git checkout new branch"
        return "gco", "Git checkout"
    return GIT_ALIASES.get(sub)


def _ssh_alias(host: str):
    host = host.rsplit("@", 1)[-1]
    short = host.split(".", 1)[0]
    if len(short) >= 2:
        return short, f"SSH to {host}"
    return None


def tool_alias(tool: str, args: Sequence[str]):
    """(alias, reason) from the fixed tool tables, or None."""
    if not args:
        return None
    sub, rest = args[0], args[1:]
    if tool == "git":
        return _git_alias(sub, rest)
    if tool == "docker":
        return DOCKER_ALIASES.get(sub)
    if tool == "npm":
        return NPM_ALIASES.get(sub)
    if tool == "ssh":
        return _ssh_alias(sub)
    return None


# generators ------------------------------------------------------------------
def semantic_aliases(command: str) -> List[AliasSuggestion]:
    """Known tools map to conventional aliases; otherwise tool initial + subcommand."""
    parts = _words(command)
    if not parts or _is_relative_path(parts[0]):
        return []
    tool, args = parts[0], parts[1:]

    hit = tool_alias(tool, args)
    if hit is not None:
        alias, reason = hit
        return [AliasSuggestion(alias, command, reason, SEMANTIC)]
    if args:
        return [AliasSuggestion(tool[0] + args[0], command,
                                f"{tool}-{args[0]} combination", COMBINATION)]
    return []


def path_executable_aliases(command: str) -> List[AliasSuggestion]:
    """./target/debug/app run -> app, app (3 letters), arun"""
    parts = _words(command)
    if not parts or not _is_relative_path(parts[0]):
        return []
    tool, args = parts[0], parts[1:]
    name = tool.rsplit("/", 1)[-1]
    if name.endswith(".exe"):
        name = name[: -len(".exe")]
    if not name:
        return []

    out = [AliasSuggestion(name, command, "Executable name", EXECUTABLE)]
    if len(name) > 2:
        out.append(AliasSuggestion(name[:3], command, "Executable abbreviation", SINGLE_WORD))
    if args:
        out.append(AliasSuggestion(name[0] + args[0], command,
                                   f"{name}-{args[0]} combination", COMBINATION))
    return out


def abbreviation_aliases(command: str) -> List[AliasSuggestion]:
    parts = _words(command)
    if len(parts) < 2:
        return []
    abbrev = "".join(p[0] for p in parts)
    if 2 <= len(abbrev) <= 4:
        return [AliasSuggestion(abbrev, command, "Abbreviation", ABBREVIATION)]
    return []


def combined_aliases(command: str) -> List[AliasSuggestion]:
    """Tool initial + first argument, tool initial + second argument."""
    parts = _words(command)
    if len(parts) < 2:
        return []
    tool = parts[0]
    out = []
    for arg in parts[1:3]:
        if len(arg) >= 2:
            out.append(AliasSuggestion(tool[0] + arg, command,
                                       f"{tool}-{arg} combination", COMBINATION))
    return out


# compound tool names with a well known short form
COMPOUND_TOOLS = (
    ("git", "lg", "LazyGit abbreviation"),
    ("docker", "dk", "Docker abbreviation"),
    ("node", "nd", "Node abbreviation"),
)


def single_word_aliases(command: str) -> List[AliasSuggestion]:
    parts = _words(command)
    if len(parts) != 1 or _is_relative_path(parts[0]):
        return []
    tool = parts[0]
    out = []
    if len(tool) > 3:
        out.append(AliasSuggestion(tool[:3], command, "3-letter abbreviation", SINGLE_WORD))
    if len(tool) > 2:
        out.append(AliasSuggestion(tool[:2], command, "2-letter abbreviation", SINGLE_WORD))
        out.append(AliasSuggestion(tool[0] + tool[-1], command, "First-last character", SINGLE_WORD))
    for needle, alias, reason in COMPOUND_TOOLS:
        if needle in tool:
            out.append(AliasSuggestion(alias, command, reason, SINGLE_WORD))
    return out


def vowel_removal_aliases(command: str) -> List[AliasSuggestion]:
    """Consonants of each word (at most 3 per word), joined and capped at 8."""
    parts = [_consonants(w)[:3] for w in _words(command)]
    combined = "".join(p for p in parts if p)[:8]
    if len(combined) >= 2 and combined != command:
        return [AliasSuggestion(combined, command, "Vowel removal", VOWEL_REMOVAL)]
    return []


def truncated_aliases(command: str) -> List[AliasSuggestion]:
    parts = _words(command)
    if not parts:
        return []
    tool = parts[0]
    out = []
    for n in range(2, min(len(tool), 5) + 1):
        trunc = tool[:n]
        if trunc != tool:
            out.append(AliasSuggestion(trunc, command, f"Truncated to {n} chars", TRUNCATION))
    return out


def extract_syllables(word: str) -> List[str]:
    """Split on vowel->consonant transitions: 'docker' -> ['do', 'cke', 'r']."""
    syllables = []
    current = ""
    prev_vowel = False
    for c in word:
        if c in VOWELS:
            current += c
            prev_vowel = True
            continue
        if prev_vowel and current:
            syllables.append(current)
            current = ""
        current += c
        prev_vowel = False
    if current:
        syllables.append(current)
    return syllables


def syllable_aliases(command: str) -> List[AliasSuggestion]:
    out = []
    for word in _words(command):
        if len(word) <= 3:
            continue
        syllables = extract_syllables(word)
        if len(syllables) < 2:
            continue
        initials = "".join(s[0] for s in syllables)
        if 2 <= len(initials) <= 4:
            out.append(AliasSuggestion(initials, command, "Syllable-based", SYLLABLE))
    return out


# applied in this order
PHONETIC_RULES = (
    ("ph", "f"),
    ("ck", "k"),
    ("qu", "kw"),
    ("x", "ks"),
    ("ch", "c"),
    ("sh", "s"),
    ("th", "t"),
)


def phonetic_form(word: str) -> str:
    for old, new in PHONETIC_RULES:
        word = word.replace(old, new)
    return word


def phonetic_aliases(command: str) -> List[AliasSuggestion]:
    out = []
    for word in _words(command):
        if len(word) <= 2:
            continue
        form = phonetic_form(word)
        if form != word and 2 <= len(form) <= 6:
            out.append(AliasSuggestion(form, command, "Phonetic", PHONETIC))
    return out


def keyboard_pattern_aliases(command: str) -> List[AliasSuggestion]:
    """Every other character of each word."""
    out = []
    for word in _words(command):
        if len(word) <= 2:
            continue
        pattern = word[::2]
        if 2 <= len(pattern) <= 4:
            out.append(AliasSuggestion(pattern, command, "Keyboard pattern", KEYBOARD))
    return out


PREFIXES = ("un", "re", "pre", "post", "anti", "pro", "sub", "super", "inter")
SUFFIXES = ("ing", "ed", "er", "est", "ly", "tion", "sion", "ment")


def affix_strip_aliases(command: str) -> List[AliasSuggestion]:
    out = []
    for word in _words(command):
        if len(word) <= 3:
            continue
        for prefix in PREFIXES:
            rest = word[len(prefix):]
            if word.startswith(prefix) and len(rest) >= 2:
                out.append(AliasSuggestion(rest, command, f"Remove prefix '{prefix}'", AFFIX_STRIP))
        for suffix in SUFFIXES:
            rest = word[: -len(suffix)]
            if word.endswith(suffix) and len(rest) >= 2:
                out.append(AliasSuggestion(rest, command, f"Remove suffix '{suffix}'", AFFIX_STRIP))
    return out


def collapse_repeats(word: str) -> str:
    out = []
    for c in word:
        if not out or out[-1] != c:
            out.append(c)
    return "".join(out)


def pattern_collapse_aliases(command: str) -> List[AliasSuggestion]:
    """Doubled letters collapsed, and the first three consonants of long words."""
    out = []
    for word in _words(command):
        if len(word) <= 3:
            continue
        collapsed = collapse_repeats(word)
        if len(collapsed) >= 2 and collapsed != word:
            out.append(AliasSuggestion(collapsed, command, "Remove duplicates", PATTERN_COLLAPSE))
        if len(word) > 4:
            consonants = _consonants(word)
            if len(consonants) >= 3:
                out.append(AliasSuggestion(consonants[:3], command, "Smart consonants", PATTERN_COLLAPSE))
    return out


GENERATORS: List[Generator] = [
    semantic_aliases,
    path_executable_aliases,
    abbreviation_aliases,
    vowel_removal_aliases,
    combined_aliases,
    single_word_aliases,
    truncated_aliases,
    syllable_aliases,
    phonetic_aliases,
    keyboard_pattern_aliases,
    affix_strip_aliases,
    pattern_collapse_aliases,
]


def weight_of(suggestion: AliasSuggestion) -> int:
    base = CATEGORY_WEIGHTS.get(suggestion.category, DEFAULT_WEIGHT)
    return base + 10 - len(suggestion.alias)
