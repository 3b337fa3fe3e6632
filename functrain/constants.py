EPS = 1.0e-12
ZERO_TOL = 1.0e-14
