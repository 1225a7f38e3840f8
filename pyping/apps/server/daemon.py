import os
import sys


class OsFacilities:
    """
    Обертка над функциями ОС, нужными для ухода в фон. Вынесена отдельно,
    чтобы `daemonize()` можно было проверить без настоящего fork().
    """
    def fork(self) -> int:
        return os.fork()

    def setsid(self) -> int:
        return os.setsid()

    def chdir(self, path: str) -> None:
        os.chdir(path)

    def redirect_std_streams(self, target: str = os.devnull) -> None:
        sys.stdout.flush()
        sys.stderr.flush()
        with open(target, 'rb', 0) as null_in:
            os.dup2(null_in.fileno(), sys.stdin.fileno())
        with open(target, 'ab', 0) as null_out:
            os.dup2(null_out.fileno(), sys.stdout.fileno())
            os.dup2(null_out.fileno(), sys.stderr.fileno())

    def umask(self, mask: int) -> int:
        return os.umask(mask)

    def exit(self, code: int) -> None:
        os._exit(code)


def daemonize(facilities: OsFacilities | None = None) -> None:
    """
    Отвязаться от терминала: fork (родитель завершается), новая сессия,
    рабочий каталог `/`, стандартные потоки в /dev/null, umask 027.

    При ошибке процесс завершается с кодом -1 (255).
    """
    facilities = facilities or OsFacilities()
    try:
        pid = facilities.fork()
    except OSError as e:
        print(f"fork failed: {e.errno}", file=sys.stderr)
        facilities.exit(-1)
        return
    if pid != 0:
        # Родительский процесс
        facilities.exit(0)
        return

    try:
        facilities.setsid()
    except OSError as e:
        print(f"setsid failed: {e.errno}", file=sys.stderr)
        facilities.exit(-1)
        return

    try:
        facilities.chdir('/')
        facilities.redirect_std_streams()
    except OSError:
        facilities.exit(-1)
        return

    facilities.umask(0o027)
