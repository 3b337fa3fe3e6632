import unittest

import torch

import functrain as ft


torch.manual_seed(0)


class TestLagrange1(unittest.TestCase):

    def test_eval(self):
        """Verifies that some simple operations with Lagrange1 
        polynomials work as intended.
        """

        poly = ft.Lagrange1(num_elems=4)

        ls = torch.linspace(-1.0, 1.0, 9)
        coeffs = torch.tensor([[2.0], [3.0], [2.0], [3.0], [2.0]])

        basis_vals = poly.eval_basis(ls)
        radon_vals = poly.eval_radon(coeffs, ls)
        deriv_vals = poly.eval_radon_deriv(coeffs, ls[:-1] + 0.125)

        basis_vals_true = torch.tensor([
            [1.0, 0.0, 0.0, 0.0, 0.0],
            [0.5, 0.5, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0, 0.0],
            [0.0, 0.5, 0.5, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.5, 0.5, 0.0],
            [0.0, 0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 0.5, 0.5],
            [0.0, 0.0, 0.0, 0.0, 1.0]
        ])

        radon_vals_true = torch.tensor([
            [2.0], [2.5], [3.0], 
            [2.5], [2.0], [2.5], 
            [3.0], [2.5], [2.0]
        ])

        deriv_vals_true = torch.tensor([
            [2.0], [2.0], [-2.0], [-2.0], 
            [2.0], [2.0], [-2.0], [-2.0]
        ])

        self.assertTrue((basis_vals_true - basis_vals).abs().max() < 1e-8)
        self.assertTrue((radon_vals_true - radon_vals).abs().max() < 1e-8)
        self.assertTrue((deriv_vals_true - deriv_vals).abs().max() < 1e-8)
        return

    def test_mass(self):
        """Checks the mass matrix and integration weights over the 
        local domain.
        """

        poly = ft.Lagrange1(num_elems=2)

        mass_true = torch.tensor([[2.0, 1.0, 0.0],
                                  [1.0, 4.0, 1.0],
                                  [0.0, 1.0, 2.0]]) / 6.0
        int_W_true = torch.tensor([0.5, 1.0, 0.5])

        self.assertTrue((poly.mass - mass_true).abs().max() < 1e-12)
        self.assertTrue((poly.int_W - int_W_true).abs().max() < 1e-12)
        self.assertTrue((poly.mass_R.T @ poly.mass_R - mass_true).abs().max() < 1e-12)
        return

    def test_product(self):
        """Products are computed by multiplying the nodal values."""

        poly = ft.Lagrange1(num_elems=3)

        coeffs_a = torch.randn((4, 2))
        coeffs_b = torch.randn((4, 2))
        poly_prod, coeffs_prod = poly.product(coeffs_a, poly, coeffs_b)

        self.assertIs(poly_prod, poly)
        self.assertTrue((coeffs_prod - coeffs_a * coeffs_b).abs().max() < 1e-14)
        return

    def test_incompatible_grids(self):

        poly_a = ft.Lagrange1(num_elems=3)
        poly_b = ft.Lagrange1(num_elems=4)

        self.assertFalse(poly_a.is_compatible(poly_b))
        with self.assertRaises(ft.DomainMismatch):
            poly_a.cross_mass(poly_b)
        with self.assertRaises(ft.DomainMismatch):
            poly_a.promote(poly_b)
        return

    def test_outside_domain(self):

        poly = ft.Lagrange1(num_elems=2)

        with self.assertWarns(UserWarning):
            ps = poly.eval_basis(torch.tensor([1.5, 0.0]))
        
        self.assertTrue(ps[0].abs().max() == 0.0)
        self.assertAlmostEqual(float(ps[1, 1]), 1.0)
        return


if __name__ == "__main__":
    unittest.main()
