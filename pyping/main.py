import click
import importlib
import pkgutil


apps_list = []  # Заполняется в коде инициализации, в конце файла


# Корневая команда pyping, к ней добавляются подкоманды.
@click.group
def cli():
    pass


@cli.command('list')
def list_apps():
    """Выводит список приложений."""
    for app_name in apps_list:
        print(f"* {app_name}")


@cli.group('run')
def run():
    """Запустить приложение."""
    pass


#############################################################################
# ИНИЦИАЛИЗАЦИЯ
#
# Просматриваем все подпакеты в пакете apps. Если в подпакете есть файл
# cli.py, а в нем команда click `cli_run()`, она добавляется подкомандой
# в группу `run` под именем подпакета. Имена таких приложений сохраняются
# в apps_list, их выводит `pyping list`.
#
# Например, для пакета `apps.client` будет добавлена команда:
#
# > pyping run client ndn:/example -c 3
#############################################################################
def __initialize__():
    from pyping import apps
    for submodule in pkgutil.iter_modules(apps.__path__):
        if not submodule.ispkg:
            continue
        name = submodule.name
        try:
            module = importlib.import_module('.cli', f'pyping.apps.{name}')
        except ModuleNotFoundError:
            print(f"WARNING: no cli.py found in {name}")
            continue
        cmd = getattr(module, "cli_run", None)
        if cmd is None:
            print(f"WARNING: no function 'cli_run(...)' found in {name}")
        elif isinstance(cmd, click.Command):
            run.add_command(cmd, name)
            apps_list.append(name)
        else:
            print("WARNING: cli_run() must be a Click command or group")


__initialize__()


if __name__ == '__main__':
    cli()
