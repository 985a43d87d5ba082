import os
import sys
import math

# log2 of the denominator used when no total count is available.
# Assumes an enormous corpus so every entry ends up very unlikely.
DEFAULT_LOG_TOTAL = 32.0


class ProbabilityDistribution:
    def __init__(self, total_path, frequency_path):
        """
        Load a total count and a table of raw frequencies, storing log2
        probabilities keyed by the whitespace-joined token(s) of each line.
        """
        self.total_path = total_path
        self.frequency_path = frequency_path
        self._table = {}

        total = self._read_total(total_path)
        if total == 0.0:
            self.log_total = DEFAULT_LOG_TOTAL
        else:
            self.log_total = math.log2(total)

        self._load_frequencies(frequency_path)

    def _read_total(self, path):
        if not os.path.exists(path):
            print(f"Total file not found at {path}. Using default log total {DEFAULT_LOG_TOTAL}.", file=sys.stderr)
            return 0.0

        try:
            with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
                for line in f:
                    try:
                        total = float(line)
                    except ValueError:
                        continue
                    # Negative or NaN totals have no log; keep scanning
                    if total >= 0.0:
                        return total
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
        return 0.0

    def _load_frequencies(self, path):
        if not os.path.exists(path):
            print(f"Frequency file not found at {path}.", file=sys.stderr)
            return

        try:
            with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
                for line in f:
                    parts = line.split()
                    if len(parts) < 2:
                        continue

                    key = " ".join(parts[:-1])
                    try:
                        freq = float(parts[-1])
                    except ValueError:
                        # A bad value ends the table; later lines are dropped
                        print(f"Stopped reading {path} at unparseable frequency {parts[-1]!r}.", file=sys.stderr)
                        break
                    if not freq >= 0.0:
                        print(f"Stopped reading {path} at invalid frequency {parts[-1]!r}.", file=sys.stderr)
                        break

                    if freq == 0.0:
                        self._table[key] = float('-inf')
                    else:
                        self._table[key] = math.log2(freq) - self.log_total
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)

        print(f"Loaded {len(self._table)} entries from {path} (log total {self.log_total:.2f}).", file=sys.stderr)

    def log_prob(self, key):
        """
        Return (log2 probability, found). Keys not in the table give
        negative infinity and found=False.
        """
        if key in self._table:
            return self._table[key], True
        return float('-inf'), False

    def __contains__(self, key):
        return key in self._table

    def __len__(self):
        return len(self._table)
