# alman/shell_init.py
# shell integration scripts printed by `alman init <shell>`

import os
import shlex
import shutil
import sys
from dataclasses import dataclass
from typing import Optional

SHELLS = ("bash", "zsh", "fish", "posix")
SHELL_ALIASES = {"ksh": "posix", "sh": "posix", "dash": "posix"}


@dataclass
class ShellOpts:
    app_path: str
    data_dir: str
    alias_file_path: str

    @classmethod
    def detect(cls, data_dir: str, alias_file_path: str) -> "ShellOpts":
        app = shutil.which("alman")
        if not app:
            app = os.path.abspath(sys.argv[0]) if sys.argv and sys.argv[0] else "alman"
        return cls(app_path=app, data_dir=data_dir, alias_file_path=alias_file_path)


def _header(shell: str, rc_file: str) -> str:
    return f"# alman shell integration for {shell}\n# Add this to your {rc_file}\n\n"


def _exports(opts: ShellOpts) -> str:
    return (
        f"export ALMAN_DATA_DIR={shlex.quote(opts.data_dir)}\n"
        f"export ALMAN_ALIAS_FILE={shlex.quote(opts.alias_file_path)}\n"
        f"export ALMAN_BIN={shlex.quote(opts.app_path)}\n\n"
        '[ -f "$ALMAN_ALIAS_FILE" ] && . "$ALMAN_ALIAS_FILE"\n\n'
    )


_POSIX_HOOK = (
    "alman_preexec() {\n"
    '    if [ -n "$1" ]; then\n'
    '        "$ALMAN_BIN" custom "$1" >/dev/null 2>&1\n'
    "    fi\n"
    "}\n\n"
)


def render_bash(opts: ShellOpts) -> str:
    return (
        _header("bash", "~/.bashrc")
        + _exports(opts)
        + _POSIX_HOOK
        # keyed on the history number so a repeated command counts again
        + "alman_prompt_hook() {\n"
        + "    local entry num\n"
        + "    entry=$(HISTTIMEFORMAT= history 1)\n"
        + r"    [[ $entry =~ ^\ *([0-9]+) ]] || return 0" + "\n"
        + "    num=${BASH_REMATCH[1]}\n"
        + '    if [ "$num" != "$ALMAN_LAST_HISTNUM" ]; then\n'
        + '        ALMAN_LAST_HISTNUM="$num"\n'
        + "        alman_preexec \"$(printf '%s\\n' \"$entry\" | sed -e '1s/^ *[0-9]* *//')\"\n"
        + "    fi\n"
        + "}\n\n"
        + "ALMAN_LAST_HISTNUM=$(HISTTIMEFORMAT= history 1 | sed -n -e '1s/^ *\\([0-9]*\\).*/\\1/p')\n\n"
        + 'case ";$PROMPT_COMMAND;" in\n'
        + '    *";alman_prompt_hook;"*) ;;\n'
        + '    *) PROMPT_COMMAND="alman_prompt_hook${PROMPT_COMMAND:+;$PROMPT_COMMAND}" ;;\n'
        + "esac\n"
    )


def render_zsh(opts: ShellOpts) -> str:
    return (
        _header("zsh", "~/.zshrc")
        + _exports(opts)
        + _POSIX_HOOK
        + "autoload -U add-zsh-hook\n"
        + "add-zsh-hook preexec alman_preexec\n"
    )


def render_fish(opts: ShellOpts) -> str:
    return (
        _header("fish", "~/.config/fish/config.fish")
        + f"set -gx ALMAN_DATA_DIR {shlex.quote(opts.data_dir)}\n"
        + f"set -gx ALMAN_ALIAS_FILE {shlex.quote(opts.alias_file_path)}\n"
        + f"set -gx ALMAN_BIN {shlex.quote(opts.app_path)}\n\n"
        + "if test -f $ALMAN_ALIAS_FILE\n"
        + "    source $ALMAN_ALIAS_FILE\n"
        + "end\n\n"
        + "function alman_preexec --on-event fish_preexec\n"
        + '    if test -n "$argv[1]"\n'
        + '        $ALMAN_BIN custom "$argv[1]" >/dev/null 2>&1\n'
        + "    end\n"
        + "end\n"
    )


def render_posix(opts: ShellOpts) -> str:
    return (
        _header("POSIX shells (ksh, dash, ...)", "~/.profile or ~/.kshrc")
        + _exports(opts)
        + _POSIX_HOOK
        + "# POSIX shells have no preexec hook; call alman_preexec yourself,\n"
        + "# e.g. from PS1: PS1='$(alman_preexec \"$(fc -ln -1)\")$ '\n"
    )


RENDERERS = {
    "bash": render_bash,
    "zsh": render_zsh,
    "fish": render_fish,
    "posix": render_posix,
}


def resolve_shell(name: str) -> Optional[str]:
    name = name.lower()
    name = SHELL_ALIASES.get(name, name)
    return name if name in RENDERERS else None


def render_shell_init(shell: str, opts: ShellOpts) -> str:
    """Raises ValueError for an unsupported shell name."""
    resolved = resolve_shell(shell)
    if resolved is None:
        raise ValueError(f"unsupported shell: {shell} (choose from {', '.join(SHELLS)})")
    return RENDERERS[resolved](opts)
