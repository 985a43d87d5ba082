import sys
import os
import time
import timeit
import argparse
import concurrent.futures

import psutil

# Add parent directory to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from bigram_segmenter import BigramSegmenter


def get_memory_mb():
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


def run_concurrently(segment_func, text, iterations, workers):
    start_time = time.time()
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(segment_func, text) for _ in range(iterations)]
        results = [future.result() for future in futures]
    end_time = time.time()
    return end_time - start_time, results


def benchmark_suite(model_path, model_name, text, iterations_seq, workers, iterations_conc):
    print(f"Initial Memory: {get_memory_mb():.2f} MB")

    print(f"Loading model {model_name!r} from {model_path}...")
    start_load = time.time()
    mem_before = get_memory_mb()
    seg = BigramSegmenter.from_model(model_path, model_name)
    mem_after = get_memory_mb()
    print(f"Load Time: {time.time() - start_load:.4f}s")
    print(f"Memory Added: {mem_after - mem_before:.2f} MB")
    print(f"Unigrams: {len(seg.unigrams)}, Bigrams: {len(seg.bigrams)}")

    print(f"\n--- Text to Segment (Length: {len(text)}) ---")
    print(text)
    print("-" * 60)

    # 1. Output
    print("\n--- 1. Segmentation Output ---")
    expected = seg.segment(text)
    print(f"{' '.join(expected)}\n")

    # 2. Sequential Speed
    print(f"--- 2. Sequential Speed ({iterations_seq} iterations) ---")
    start_mem = get_memory_mb()
    t_seq = timeit.timeit(lambda: seg.segment(text), number=iterations_seq)
    end_mem = get_memory_mb()
    print(f"{t_seq/iterations_seq*1000:.3f}ms per call (Mem Delta: {end_mem-start_mem:.2f} MB)")

    # 3. Concurrent Speed
    print(f"\n--- 3. Concurrent Speed ({workers} workers, {iterations_conc} total calls) ---")
    start_mem = get_memory_mb()
    t_conc, results = run_concurrently(seg.segment, text, iterations_conc, workers)
    end_mem = get_memory_mb()
    print(f"{iterations_conc / t_conc:.2f} calls/sec (Mem Delta during run: {end_mem-start_mem:.2f} MB)")

    mismatches = sum(1 for r in results if r != expected)
    if mismatches:
        print(f"Warning: {mismatches} concurrent results differ from the sequential output.")
    else:
        print("All concurrent results match the sequential output.")


if __name__ == "__main__":
    data_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'data')

    parser = argparse.ArgumentParser(description="Benchmark the bigram segmenter")
    parser.add_argument("--path", default=data_dir, help="Directory holding the models")
    parser.add_argument("--model", default="small", help="Model name")
    parser.add_argument("--text", default="theboywholived" * 20, help="Text to segment")
    parser.add_argument("--iterations", type=int, default=200, help="Sequential iterations")
    parser.add_argument("--workers", type=int, default=10, help="Concurrent workers")
    parser.add_argument("--calls", type=int, default=1000, help="Total concurrent calls")
    args = parser.parse_args()

    benchmark_suite(args.path, args.model, args.text, args.iterations, args.workers, args.calls)
