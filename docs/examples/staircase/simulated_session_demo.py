"""
Staircase example: run a simulated acuity session and plot the track
--------------------------------------------------------------------

This script runs the full headless pipeline on a synthetic observer:

1. Define a SimulatedObserver with a known threshold size t*.
2. Drive a StaircaseController (1-up/3-down) through an AcuitySession.
3. Store the SessionResult in a JSON history next to this script.
4. Plot the stimulus size per trial, mark the reversals, and compare the
   estimated threshold with t*.

The observer answers correctly with probability

    p(correct | s) = 1/4 + (3/4 - lapse) * sigmoid(slope * (log s - log t*))

A 1-up/3-down rule converges near the size where p(correct) ~ 0.794, which
sits slightly above t* for this observer; the estimate is informational and
not a clinical measure.
"""

from __future__ import annotations

import os
import sys

import jax.random as jr
import matplotlib.pyplot as plt
import numpy as np

# Allow running the script directly from repo root without installing the package.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../src")))
# --8<-- [start:imports]
from clearsight.data.io import SessionHistory
from clearsight.model.observer import ObserverConfig, SimulatedObserver
from clearsight.session import AcuitySession
from clearsight.trial_placement import StaircaseConfig, StaircaseController
from clearsight.utils.diagnostics import format_session_result, summarize_history

# --8<-- [end:imports]

PLOTS_DIR = os.path.join(os.path.dirname(__file__), "plots")
HISTORY_PATH = os.path.join(os.path.dirname(__file__), "plots", "history.json")

TRUE_THRESHOLD = 0.07
SEED = 0

# ---------- Run the session ----------

config = StaircaseConfig(total_trials=60)
controller = StaircaseController(config, seed=SEED)
observer = SimulatedObserver(ObserverConfig(threshold_norm=TRUE_THRESHOLD), jr.PRNGKey(SEED + 1))

history = SessionHistory(HISTORY_PATH)
history.load()
session = AcuitySession(controller, history)
result = session.run(observer)

print(format_session_result(result))
summary = summarize_history(history.read_all())
print(f"\n{summary.n_sessions} session(s) stored, best threshold {summary.best.threshold_norm:.4f}")

# ---------- Plot ----------

sizes, correct = session.log.to_numpy()
trials = np.arange(len(sizes))

fig, ax = plt.subplots(figsize=(8, 4))
ax.plot(trials, sizes, color="0.6", lw=1, zorder=1)
ax.scatter(trials[correct], sizes[correct], marker="o", color="tab:green", label="correct", zorder=2)
ax.scatter(trials[~correct], sizes[~correct], marker="x", color="tab:red", label="incorrect", zorder=2)
for r in controller.reversals:
    ax.axhline(r, color="tab:blue", alpha=0.15, lw=1)
ax.axhline(TRUE_THRESHOLD, color="k", ls="--", lw=1, label=f"observer t* = {TRUE_THRESHOLD}")
ax.axhline(result.threshold_norm, color="tab:blue", lw=1.5, label=f"estimate = {result.threshold_norm:.3f}")
ax.set_yscale("log")
ax.set_xlabel("trial")
ax.set_ylabel("size (fraction of short side)")
ax.set_title(f"1-up/3-down staircase ({len(controller.reversals)} reversals)")
ax.legend(loc="upper right", fontsize=8)
plt.tight_layout()

os.makedirs(PLOTS_DIR, exist_ok=True)
track_path = os.path.join(PLOTS_DIR, "staircase_track.png")
fig.savefig(track_path, dpi=200, bbox_inches="tight")
print(f"Saved plot to {track_path}")
plt.show()
