"""
soustack_lite.cli
=================

Punto de entrada mínimo para convertir una receta en texto libre a un
documento Soustack Lite desde la terminal:

1) Leer el texto (archivo o stdin).
2) Parsearlo y compilarlo (`convert_text`).
3) Imprimir el JSON canónico o escribirlo a disco.
4) Opcionalmente, mostrar los chequeos de "mise en place" y las capacidades
   sugeridas.

Pensado para smoke tests manuales y para validar conversiones rápidas.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .checks import compute_mise_checks
from .config import get_settings
from .engine import convert_text
from .export import export_filename, export_json, write_json
from .inference import suggest_capabilities


def main(argv: list[str] | None = None) -> int:
    """
    Ejecuta una conversión.

    Returns
    -------
    int
        Código de salida (0 ok, 1 entrada vacía).
    """
    parser = argparse.ArgumentParser(prog="soustack-lite", description="Texto libre → Soustack Lite JSON")
    parser.add_argument("input", nargs="?", default="-", help="Archivo de texto (o '-' para stdin)")
    parser.add_argument("-o", "--output", default="", help="Archivo o carpeta de salida; vacío imprime a stdout")
    parser.add_argument("--source", default="paste", help="Origen del texto (paste|upload|manual)")
    parser.add_argument("--no-prose", action="store_true", help="No guardar el texto original en la extensión")
    parser.add_argument("--checks", action="store_true", help="Mostrar chequeos y capacidades sugeridas")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.input == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.input).read_text(encoding="utf-8")

    if not text.strip():
        print("❌ El texto de entrada está vacío.", file=sys.stderr)
        return 1

    result = convert_text(text, source=args.source, keep_prose=not args.no_prose)
    doc = result["document"]
    parse = result["parse"]

    if args.output:
        out = Path(args.output)
        if out.is_dir():
            out = out / export_filename(doc)
        write_json(doc, out)
        print(f"✅ JSON generado en: {out.resolve()}")
    else:
        print(export_json(doc))

    print(f"ℹ️  parse: mode={parse.mode} confidence={parse.confidence:.2f}", file=sys.stderr)

    if args.checks:
        for check in compute_mise_checks(doc):
            print(f"⚠️ [{check.severity}] {check.id}: {check.message}", file=sys.stderr)
        suggestions = suggest_capabilities(doc)
        if suggestions:
            print(f"💡 Capacidades sugeridas: {', '.join(suggestions)}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
