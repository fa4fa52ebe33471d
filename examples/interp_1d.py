"""
Demonstrate the interpolation of a 1D signal with the different degrees,
and the effect of the extrapolation policies.
"""

import numpy as np
import gridinterp

# Create 1D signal
t0 = np.linspace(0, 6, 400)
a0 = np.sin(t0) + 1

# Create decimated version
a1 = a0[::50]

# Interpolate at twice the resolution
t = np.linspace(1, len(a1), 2 * len(a1) - 1)
for degree in ('nearest', 'linear', 'quadratic'):
    itp = gridinterp.build(a1, degree)
    print('%-10s' % degree, np.round(itp.sample(t), 3))

# And beyond
t9 = np.linspace(-2, len(a1) + 3, 15)
itp = gridinterp.build(a1, gridinterp.AxisSpec(2, gridinterp.Flat()))
for policy in ('flat', 'reflect', 'nan'):
    ex = gridinterp.wrap(itp, policy)
    print('%-10s' % policy, np.round(ex.sample(t9), 3))
