"""Benchmark: rule set compilation and tokenization throughput.

Measures how many scans and rule set compilations can complete per
second using the public rulelex API and the bundled 1C rule set.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rulelex
from rulelex.lexer import Scanner

_ITERATIONS: int = 2_000
_COMPILE_ITERATIONS: int = 500

_SAMPLE_1C = """
#Если Сервер Тогда
&НаСервере
Процедура Рассчитать(Сумма, Ставка) Экспорт
    // налог с округлением
    Налог = Окр(Сумма * Ставка / 100, 2);
    Текст = "Сумма: "" " + Сумма + "
    |налог: " + Налог;
    Если Налог <> 0 И Дата >= '20100207' Тогда
        Сообщить(Текст);
    КонецЕсли;
КонецПроцедуры
#КонецЕсли
"""


def bench_tokenize_throughput() -> dict[str, object]:
    """Benchmark tokenization of a small 1C module with a reused scanner.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    scanner = Scanner(rulelex.load_builtin("1c"))

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        scanner.parse(_SAMPLE_1C)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "rulelex_tokenize_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_compile_throughput() -> dict[str, object]:
    """Benchmark loading and compiling the bundled 1C rule set.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(_COMPILE_ITERATIONS):
        rulelex.load_builtin("1c")
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "rulelex_compile_throughput",
        "iterations": _COMPILE_ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_COMPILE_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _COMPILE_ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_tokenize_throughput, "tokenize_throughput_baseline.json"),
        (bench_compile_throughput, "compile_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
