import argparse

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def load_run(csv_path):
    df = pd.read_csv(csv_path, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    msgs = df[df["messages"].notna()][["local", "messages"]]
    queries = df[df["tracked remote"].notna()][["local", "actual remote", "tracked remote"]]
    return msgs, queries


def tracking_error(queries):
    return (queries["tracked remote"] - queries["actual remote"]).to_numpy()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("csv", help="output of timetrack-sim")
    ap.add_argument("--save", type=str, default=None)
    args = ap.parse_args()

    msgs, queries = load_run(args.csv)
    err = tracking_error(queries)
    print(f"queries={len(queries)} rmse={np.sqrt(np.mean(err**2)):.4f} max|err|={np.max(np.abs(err)):.4f}")

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(7, 5), sharex=True)
    ax1.plot(queries["local"], queries["actual remote"], label="actual remote", linewidth=1.5)
    ax1.plot(queries["local"], queries["tracked remote"], label="tracked remote", linewidth=1.2)
    ax1.scatter(msgs["local"], msgs["messages"], s=10, c="k", label="messages", zorder=3)
    ax1.set_ylabel("Remote time (s)")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.plot(queries["local"], err * 1e3, linewidth=1.2)
    ax2.set_xlabel("Local time (s)")
    ax2.set_ylabel("Tracking error (ms)")
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    if args.save:
        plt.savefig(args.save, dpi=150)
    else:
        plt.show()


if __name__ == "__main__":
    main()
