"""sweep-hwe: Hardy-Weinberg monitoring of a single selective sweep.

Tracks one selected allele from its introduction until it fixes or is
lost, and each generation tests whether the genotype composition of the
population departs from Hardy-Weinberg proportions:
  - Genotype classification (derived/heterozygous/ancestral)
  - Expected counts under HWE (p², 2pq, q²)
  - One-df chi-square goodness of fit at a fixed critical value (3.84)
  - Per-generation history and a terminal significance summary

A small single-locus Wright-Fisher host and a driving loop are included
so the monitor can be run end to end.
"""

__version__ = "0.1.0"
