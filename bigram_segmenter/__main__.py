import argparse
import sys
import os
import time
import concurrent.futures

import psutil
from tqdm import tqdm

from .segmenter import DEFAULT_MAX_TOKEN_LENGTH, BigramSegmenter


def get_memory_mb():
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


def run_concurrently(segment_func, lines, workers):
    # Each segment() call builds its own memo, so one segmenter can be shared
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(segment_func, lines))


def default_data_dir():
    # data/ sits next to the bigram_segmenter/ package at the repo root
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(current_dir)
    data_dir = os.path.join(project_root, 'data')
    if not os.path.isdir(data_dir) and os.path.isdir('data'):
        return 'data'
    return data_dir


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be a positive integer")
    return number


def format_result(text, tokens):
    return f"{text}\t{' '.join(tokens)}\n"


def segment_stream(seg, stream, out):
    """Segment one line at a time until the stream ends."""
    for line in stream:
        text = line.rstrip('\r\n')
        out.write(format_result(text, seg.segment(text)))
        out.flush()


def read_lines(paths, limit=-1):
    lines = []
    for filepath in paths:
        if limit == 0:
            break
        try:
            with open(filepath, 'r', encoding='utf-8', errors='surrogateescape') as f:
                for line in f:
                    if limit == 0:
                        break
                    lines.append(line.rstrip('\r\n'))
                    if limit > 0:
                        limit -= 1
        except OSError as e:
            print(f"Error reading {filepath}: {e}", file=sys.stderr)
    return lines


def timed(func, *args):
    """Run func(*args), returning (result, seconds, RSS growth in MB)."""
    start_mem = get_memory_mb()
    start_time = time.time()
    result = func(*args)
    elapsed = max(time.time() - start_time, 0.001)
    return result, elapsed, get_memory_mb() - start_mem


def benchmark(seg, lines, threads):
    size_mb = sum(len(line.encode('utf-8', 'surrogateescape')) for line in lines) / (1024 * 1024)
    print(f"--- Input Benchmark ({len(lines)} lines, {size_mb:.2f} MB, max token length {seg.max_token_length}) ---")

    expected, dur_seq, mem_seq = timed(lambda: [seg.segment(line) for line in lines])
    print(f"sequential: {len(lines) / dur_seq:.2f} lines/sec in {dur_seq:.3f}s (mem {mem_seq:+.2f} MB)")

    if threads > 1:
        results, dur_conc, mem_conc = timed(run_concurrently, seg.segment, lines, threads)
        print(f"{threads} threads: {len(lines) / dur_conc:.2f} lines/sec in {dur_conc:.3f}s "
              f"(mem {mem_conc:+.2f} MB, speedup {dur_seq / dur_conc:.2f}x)")
        mismatches = sum(1 for a, b in zip(results, expected) if a != b)
        if mismatches:
            print(f"Warning: {mismatches} threaded results differ from sequential results.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bigram word segmenter. Reads lines from stdin and "
                                                 "writes 'text<TAB>tokens' to stdout.")
    parser.add_argument("--path", default=default_data_dir(), help="Directory holding the models")
    parser.add_argument("--model", default="small", help="Model name (subdirectory of --path)")
    parser.add_argument("--max", type=positive_int, default=DEFAULT_MAX_TOKEN_LENGTH,
                        help="Maximum token length in code points")
    parser.add_argument("--input", nargs="+", help="Input file(s) to segment instead of stdin")
    parser.add_argument("--output", help="Write results to this file (with a progress bar)")
    parser.add_argument("--limit", type=int, default=-1, help="Limit number of input lines")
    parser.add_argument("--benchmark", action="store_true", help="Run benchmark mode on --input")
    parser.add_argument("--threads", type=positive_int, default=4,
                        help="Number of threads for concurrent benchmark")

    args = parser.parse_args(argv)

    if args.benchmark and not args.input:
        parser.error("--benchmark requires --input")

    start_load = time.time()
    seg = BigramSegmenter.from_model(args.path, args.model, args.max)
    print(f"Model {args.model!r} loaded from {args.path} in {time.time() - start_load:.3f}s", file=sys.stderr)

    if args.benchmark:
        benchmark(seg, read_lines(args.input, args.limit), args.threads)
    elif args.input:
        lines = read_lines(args.input, args.limit)
        if args.output:
            output_dir = os.path.dirname(args.output)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            with open(args.output, 'w', encoding='utf-8', errors='surrogateescape') as f_out:
                for line in tqdm(lines, desc="Segmenting"):
                    f_out.write(format_result(line, seg.segment(line)))
            print(f"Done. Wrote {len(lines)} lines to {args.output}.", file=sys.stderr)
        else:
            for line in lines:
                sys.stdout.write(format_result(line, seg.segment(line)))
    else:
        segment_stream(seg, sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()
