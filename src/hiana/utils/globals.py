"""Physical constants and detector-wide definitions shared across the package."""

# Particle species (nuclei) identifiers
DEUT_PID = 1
TRIT_PID = 2
HE3_PID = 3

# Nucleon mass used to scale the dE/dx parametrization (GeV/c^2)
NUCLEON_MASS = 0.938

# Nuclei masses (GeV/c^2)
PID_MASSES = {
    DEUT_PID: 1.875612762,
    TRIT_PID: 2.808939,
    HE3_PID: 2.80892,
}

# Number of nucleons of each nucleus
PID_NUCLEONS = {DEUT_PID: 2, TRIT_PID: 3, HE3_PID: 3}

# TOF mass windows used to select candidates (GeV/c^2)
PID_MASS_WINDOWS = {
    DEUT_PID: (1.05, 2.65),
    TRIT_PID: (1.8, 5.0),
    HE3_PID: (1.8, 5.0),
}

# ALEPH Bethe-Bloch parameters of the TPC response (singly/doubly charged)
BB_ALEPH_PARAMS = (1.45802, 27.4992, 4.00313e-15, 2.48485, 8.31768)
BB_ALEPH_PARAMS_Z2 = (1.74962, 27.4992, 4.00313e-15, 2.42485, 8.31768)

# Speed of light in cm/ps
SPEED_OF_LIGHT = 2.99792457999999984e-02

# Trigger class bits
TRIGGER_MB = 1 << 0
TRIGGER_CENTRAL = 1 << 4
TRIGGER_SEMI_CENTRAL = 1 << 7

# Calorimeter cluster types
EMCAL_CLUSTER = 0
PHOS_CLUSTER = 1

# Clusterizer algorithm flags
CLUSTERIZER_V1 = 0
CLUSTERIZER_NXN = 1

# Digit type of the high gain channel
DIGIT_HIGH_GAIN = 0
