"""Analysis tasks.

- `emcal`: reclusterization of the EMCAL cells (`emcal_clusterize`)
- `nuclei`: elliptic flow of light nuclei (`nuclei_flow`)

The tasks are configured under the `ana` block of the configuration and
run in order of priority by :class:`AnaManager`.
"""

from .manager import AnaManager
