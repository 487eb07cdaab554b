#!/usr/bin/env python3
"""
Comment Translator - Launcher
=============================
Start the API server, or annotate a single source file from the terminal.

Usage:
    python run.py serve
    python run.py annotate src/app.ts --lang es
    python run.py annotate src/app.ts --lang es --watch
"""
import argparse
import sys
import time
import threading
from pathlib import Path

package_dir = Path(__file__).parent
if str(package_dir) not in sys.path:
    sys.path.insert(0, str(package_dir))

from comment_translator.config import config
from comment_translator.utils.debounce import Debouncer


class Colors:
    RESET = '\033[0m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'


# File extension -> programming language id
EXTENSION_LANGUAGES = {
    '.ts': 'typescript',
    '.tsx': 'typescriptreact',
    '.js': 'javascript',
    '.jsx': 'javascriptreact',
    '.java': 'java',
    '.c': 'c',
    '.h': 'c',
    '.cpp': 'cpp',
    '.cc': 'cpp',
    '.hpp': 'cpp',
    '.cs': 'csharp',
    '.go': 'go',
    '.rs': 'rust',
    '.swift': 'swift',
    '.kt': 'kotlin',
    '.py': 'python',
    '.rb': 'ruby',
    '.sh': 'shellscript',
    '.yml': 'yaml',
    '.yaml': 'yaml',
}


def render(text: str, result) -> str:
    """Source text with ``[phrase] replacement`` annotations spliced in."""
    out = []
    position = 0
    for decoration in sorted(result.decorations, key=lambda d: d.range.start):
        out.append(text[position:decoration.range.start])
        out.append(f"{Colors.GRAY}[{Colors.RESET}{text[decoration.range.start:decoration.range.end]}")
        out.append(f"{Colors.GRAY}] {decoration.replacement}{Colors.RESET}")
        position = decoration.range.end
    out.append(text[position:])
    return ''.join(out)


def annotate_file(path: Path, language_id: str, target_lang: str, lock: threading.Lock) -> bool:
    from comment_translator.services.orchestrator import get_comment_translator

    with lock:
        text = path.read_text(encoding='utf-8')
        result = get_comment_translator().process_document(text, language_id, target_lang)

        if result.warning:
            print(f"{Colors.YELLOW}⚠ {result.warning}{Colors.RESET}")
            return False

        print(render(text, result))
        print(
            f"{Colors.CYAN}{len(result.decorations)} annotations "
            f"({result.cache_hits} from dictionary){Colors.RESET}"
        )
        return True


def watch_file(path: Path, language_id: str, target_lang: str, lock: threading.Lock):
    """Re-annotate whenever the file changes, coalescing bursts of saves."""
    debounced = Debouncer(
        config.translation.debounce_seconds,
        annotate_file
    )
    last_mtime = path.stat().st_mtime
    print(f"{Colors.GREEN}👀 Watching {path} (Ctrl+C to stop){Colors.RESET}")
    try:
        while True:
            time.sleep(0.2)
            mtime = path.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime
                debounced(path, language_id, target_lang, lock)
    except KeyboardInterrupt:
        debounced.cancel()
        print(f"\n{Colors.YELLOW}👋 Stopped watching{Colors.RESET}")


def cmd_annotate(args) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"{Colors.RED}✗ File not found: {path}{Colors.RESET}")
        return 1

    language_id = args.language_id or EXTENSION_LANGUAGES.get(path.suffix.lower())
    if not language_id:
        print(f"{Colors.RED}✗ Cannot infer language for {path.name}; pass --language-id{Colors.RESET}")
        return 1

    lock = threading.Lock()
    ok = annotate_file(path, language_id, args.lang, lock)
    if args.watch and ok:
        watch_file(path, language_id, args.lang, lock)
    return 0 if ok else 2


def cmd_serve(args) -> int:
    from comment_translator.app import run_server

    if not config.translator.api_key:
        print(f"{Colors.YELLOW}⚠ OPENAI_API_KEY is not set; only cached phrases will resolve{Colors.RESET}")
    run_server()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Translate random phrases from code comments")
    sub = parser.add_subparsers(dest='command')

    serve = sub.add_parser('serve', help='Run the HTTP API')
    serve.set_defaults(func=cmd_serve)

    annotate = sub.add_parser('annotate', help='Annotate one source file')
    annotate.add_argument('file')
    annotate.add_argument('--lang', default=config.translation.default_target_language,
                          help='Target language code')
    annotate.add_argument('--language-id', help='Programming language id (inferred from extension)')
    annotate.add_argument('--watch', action='store_true', help='Re-annotate on every change')
    annotate.set_defaults(func=cmd_annotate)

    args = parser.parse_args(argv)
    if not getattr(args, 'func', None):
        args = parser.parse_args(['serve'])
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
