## lumen — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# lumen — A small dynamically-typed scripting language with a Pratt parser and tree-walking evaluator.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import (LumenError, LumenParseError, LumenIncompleteParse, LumenTypeError, LumenAssignmentError,
                     LumenUnsupportedFeature, LumenRecursionError, LumenExit)
from .parser import format_parse_error_context, format_source_lines
from .formatting import write_without_ansi, format_literal
from .environment import coerce_binding

from . import api


SOURCE_SUFFIX = '.lumen'


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool
    defines: tuple[str, ...] = ()


@dataclass
class ExecutionItem:
    source: str
    filename: str


class LumenRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.exit_status = None
        self.executed_items = 0

        for definition in config.defines:
            self._define(definition)

    def _define(self, definition: str) -> None:
        name, sep, raw = definition.partition('=')
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got `{definition}`.", param_hint='--define')
        self.runtime.define(name.strip(), coerce_binding(raw))

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        if is_repl: return
        self.failure = True
        if not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> bool:
        if isinstance(exc, LumenParseError):
            if is_repl and isinstance(exc, LumenIncompleteParse): return True
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, (LumenTypeError, LumenAssignmentError)):
            detail = f"Operator `\033[1;97m{exc.lumen_token}\033[0m` from `\033[97m{filename}\033[0m` cannot be applied: {exc}"
            context = '\n' + format_source_lines(exc.lumen_meta, exc.lumen_token, source=source)
            self._maybe_fatal_error("TYPE ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, LumenUnsupportedFeature):
            context = '\n' + format_source_lines(exc.lumen_meta, exc.lumen_token, source=source)
            self._maybe_fatal_error("UNSUPPORTED FEATURE.", str(exc), type(exc).__name__, context, is_repl)
        elif isinstance(exc, LumenRecursionError):
            self._maybe_fatal_error("RECURSION ERROR.", f"{exc} Reduce the nesting of `\033[97m{filename}\033[0m`.", type(exc).__name__, '', is_repl)
        elif isinstance(exc, Exception):
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Evaluating `\033[97m{filename}\033[0m` caused an error in interpret! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            if (meta := getattr(exc, 'lumen_meta', None)):
                print(format_source_lines(meta, getattr(exc, 'lumen_token', None) or '<statement>', source=source), file=sys.stderr)
            traceback.print_exc()
            if not is_repl:
                self.failure = True
                if not self.ignore: sys.exit(1)
        return False

    def execute_items(self, items: list[ExecutionItem] | tuple[ExecutionItem, ...]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False, print_result: bool = False) -> None:
        try:
            result = self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
            if print_result and result is not None:
                print(format_literal(result))
        except (LumenError, Exception) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def run(self, items: list[ExecutionItem] | tuple[ExecutionItem, ...]) -> int:
        """Execute items until one of them returns, then report the final exit status."""
        try:
            self.execute_items(items)
        except LumenExit as exc:
            self.executed_items += 1
            self.exit_status = exc.status
        return self.finalize()

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('lumen - Scripting language REPL; type `exit` or Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0 and not source: continue
                if line.strip() in ('quit', 'exit') and not source: break
                source += line + "\n"

                try:
                    result = self.runtime.run(source, filename='<REPL>', verbosity=self.verbose, stats=self.total_stats)
                    if result is not None: print("\033[90m>>>\033[0m", format_literal(result))
                    source = ""
                except LumenExit as exc:
                    self.exit_status = exc.status
                    break
                except (LumenError, Exception) as exc:
                    if not self._handle_exception(exc, '<REPL>', source, is_repl=True):
                        source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        if self.exit_status is not None: return self.exit_status
        return 1 if self.failure else 0


def _inline_command_source(index: int, command: str) -> ExecutionItem:
    return ExecutionItem(command.rstrip() + '\n', f'<INPUT_{index}>')


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, Path | str | None]]:
    actions: list[tuple[str, Path | str | None]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == '--':
            index += 1
            continue
        if token in ('-c', '--command'):
            index += 1
            if index >= len(tokens):
                raise click.BadParameter("Missing inline code after -c/--command option.")
            actions.append(('command', tokens[index]))
            index += 1
            continue
        if token.startswith('-c=') or token.startswith('--command='):
            _, value = token.split('=', 1)
            if value == '':
                raise click.BadParameter("Empty code supplied to command option.")
            actions.append(('command', value))
            index += 1
            continue
        if token in ('-r', '--repl'):
            actions.append(('repl', None))
            index += 1
            continue
        if token.startswith('-'):
            raise click.BadParameter(f"Unknown option `{token}`.")
        path = Path(token)
        if not path.exists():
            raise click.BadParameter(f"File `{token}` not found.")
        if path.suffix != SOURCE_SUFFIX:
            raise click.BadParameter(f"Expected `{SOURCE_SUFFIX}` source file, got `{token}`.")
        actions.append(('file', path))
        index += 1
    return actions


@click.group(invoke_without_command=True, context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.option('--verbose', '-v', default=0, count=True, help='Trace statements as they execute (-vv includes nested blocks).')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of statements).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--define', '-D', 'defines', multiple=True, metavar='NAME=VALUE', help='Bind a global variable before running.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool, defines: tuple[str, ...]) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain, defines=defines)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = LumenRunner(ctx.obj['config'])
    ctx.exit(runner.run((ExecutionItem(script.read(), script.name or '<STDIN>'),)))


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = LumenRunner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens))

    command_index = 1
    try:
        for action, payload in actions:
            if action == 'file':
                runner.execute_items((ExecutionItem(payload.read_text(encoding='utf-8'), str(payload)),))
            elif action == 'command':
                item = _inline_command_source(command_index, payload)
                runner._execute_script(item.source, item.filename, is_repl=False, print_result=True)
                command_index += 1
            elif action == 'repl':
                runner.repl()
            else:
                raise NotImplementedError
    except LumenExit as exc:
        runner.exit_status = exc.status

    if not actions:
        runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = LumenRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def _split_global_options(args: list[str]) -> tuple[list[str], list[str]]:
    flags = ('--ignore', '--stats', '--plain', '-i', '-p')
    g, r, index = [], [], 0
    while index < len(args):
        token = args[index]
        if token in ('-D', '--define') and index + 1 < len(args):
            g.extend(args[index:index+2]); index += 2
            continue
        if token in flags or token.startswith('--define=') or (token.startswith('-v') and set(token[1:]) == {'v'}) or token == '--verbose':
            g.append(token)
        else:
            r.append(token)
        index += 1
    return g, r


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g, r = _split_global_options(a)
    pos = [t for t in r if not t.startswith('-')]
    has_dev_opt = any(t in ('-c', '-r') or t.startswith('--command') for t in r)

    if len(r) == 0:
        # No args: if stdin has data, treat as file '-', else REPL
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
    elif r == ['-']:
        cmd, tail = 'run-file', ['-']
    elif r == ['--repl']:
        cmd, tail = 'run-repl', []
    elif len(pos) == 1 and not has_dev_opt and Path(pos[0]).is_file():
        cmd, tail = 'run-file', [pos[0]]
    else:
        cmd, tail = 'run-dev', r

    cli.main(args=[*g, cmd, *tail], prog_name='lumen')


if __name__ == "__main__":
    main()
