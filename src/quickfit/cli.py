"""
Interfaz de línea de comandos para el simulador Quick Fit.

Este módulo ofrece la interfaz CLI para ejecutar un guion de operaciones,
trabajar en modo interactivo y mostrar la tabla de categorías.
"""

import argparse
import sys

from .errors import InvalidSizeError
from .io import parse_categories, parse_size, read_config_json, read_requests_csv
from .models import AllocatorConfig, DEFAULT_INITIAL_FREE_COUNT
from .simulator import QuickFitSimulator


def create_parser():
    """
    Crea el parser de argumentos de la línea de comandos.

    Returns:
        argparse.ArgumentParser: Parser configurado.
    """
    parser = argparse.ArgumentParser(
        description="Simulador de asignación de memoria Quick Fit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python -m quickfit --csv examples/requests.csv
  python -m quickfit --categories 32,64,128 --initial-count 3 --interactive
        """
    )

    parser.add_argument(
        "--csv",
        help="Ruta al archivo CSV con las operaciones (op,size)"
    )

    parser.add_argument(
        "--config",
        help="Ruta a un JSON con 'categories' e 'initial_free_count'"
    )

    parser.add_argument(
        "--categories",
        help="Tamaños de bloque separados por comas (ej. 50,100,200,300,500)"
    )

    parser.add_argument(
        "--initial-count",
        type=int,
        default=None,
        help=f"Bloques libres iniciales por categoría (por defecto: {DEFAULT_INITIAL_FREE_COUNT})"
    )

    parser.add_argument(
        "--no-header",
        action="store_true",
        help="No imprimir encabezados en la salida"
    )

    parser.add_argument(
        "--log-level",
        choices=["INFO", "DEBUG", "WARNING"],
        default="WARNING",
        help="Nivel de log: WARNING (por defecto), INFO o DEBUG"
    )

    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Ejecuta la simulación en modo interactivo"
    )

    return parser


def build_config(args) -> AllocatorConfig:
    """
    Combina --config, --categories e --initial-count en una configuración.

    Las opciones explícitas tienen prioridad sobre el archivo JSON.
    """
    config = read_config_json(args.config) if args.config else AllocatorConfig()

    categories = parse_categories(args.categories) if args.categories is not None else config.categories
    initial = args.initial_count if args.initial_count is not None else config.initial_free_count

    return AllocatorConfig(categories=categories, initial_free_count=initial)


def print_summary(summary, show_header=True):
    """
    Imprime las estadísticas de resumen.

    Args:
        summary: Diccionario devuelto por QuickFitSimulator.summarize().
        show_header: Si se imprime el encabezado de sección.
    """
    if show_header:
        print("\nResumen:")

    print(f"Asignaciones exitosas: {summary['allocations_ok']}")
    print(f"Asignaciones fallidas: {summary['allocations_failed']}")
    print(f"Liberaciones exitosas: {summary['deallocations_ok']}")
    print(f"Liberaciones fallidas: {summary['deallocations_failed']}")
    print(f"Resets: {summary['resets']}")
    print(f"Fragmentación interna total: {summary['internal_fragmentation']} KB")


def ejecutar_comando(simulator, linea, show_header=True):
    """
    Interpreta una línea del modo interactivo.

    Returns:
        bool: False si el usuario pidió salir.
    """
    partes = linea.strip().split()
    if not partes:
        return True

    comando = partes[0].lower()
    argumento = partes[1] if len(partes) > 1 else ""

    if comando in {"q", "quit", "exit"}:
        return False

    if comando in {"a", "allocate"}:
        try:
            size = parse_size(argumento, what="process size")
        except InvalidSizeError as e:
            print(e)
            return True
        print(simulator.allocate(size)['message'])
    elif comando in {"d", "deallocate"}:
        try:
            size = parse_size(argumento, what="block size")
        except InvalidSizeError as e:
            print(e)
            return True
        print(simulator.deallocate(size)['message'])
    elif comando in {"r", "reset"}:
        print(simulator.reset()['message'])
    elif comando in {"s", "status"}:
        pass
    else:
        print(f"Comando desconocido: {comando}")
        return True

    print(simulator.snapshot(show_header=show_header))
    return True


def main(argv=None):
    """
    Punto de entrada principal de la aplicación CLI.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        simulator = QuickFitSimulator(config, nivel_log=args.log_level)

        if args.interactive:
            print("Modo interactivo. Comandos: 'a N' asignar, 'd N' liberar, 'r' reset, 's' estado, 'q' salir.")
            print(simulator.snapshot(show_header=not args.no_header))

            while True:
                try:
                    linea = input("quickfit> ")
                except EOFError:
                    break
                if not ejecutar_comando(simulator, linea, not args.no_header):
                    break

            print_summary(simulator.summarize(), not args.no_header)
            return 0

        if not args.csv:
            print(simulator.snapshot(show_header=not args.no_header))
            return 0

        requests = read_requests_csv(args.csv)
        if not requests:
            print("No se cargaron operaciones desde el archivo CSV.")
            return 1

        summary = simulator.run(requests)

        for record in summary['step_log']:
            print(f"[{record['step']}] {record['message']}")

        if not args.no_header:
            print("\nEstado final:")
        print(simulator.snapshot(show_header=not args.no_header))
        print_summary(summary, not args.no_header)

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error inesperado: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
