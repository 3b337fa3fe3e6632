import unittest

import torch

import functrain as ft 


torch.manual_seed(0)


class TestApproxBases(unittest.TestCase):

    def setup_bases(self):

        polys = [
            ft.Lagrange1(num_elems=3),
            ft.Legendre(order=2),
            ft.Fourier(order=4)
        ]

        domains = [
            ft.BoundedDomain(bounds=torch.tensor([-2., 1.])),
            ft.BoundedDomain(bounds=torch.tensor([-1., 1.])),
            ft.BoundedDomain(bounds=torch.tensor([-2., 2.]))
        ]

        bases = ft.ApproxBases(polys, domains, dim=3)

        return bases

    def test_check_compatible(self):
        """Trains built on mismatched bases should not be combined."""

        bases = self.setup_bases()
        f = ft.FunctionTrain.linear([1.0, 2.0, 3.0], bases)

        domain = ft.BoundedDomain(bounds=torch.tensor([-2., 1.]))
        same = ft.ApproxBases(
            [ft.Lagrange1(num_elems=3), ft.Legendre(order=4), ft.Fourier(order=4)],
            bases.domains, 
            dim=3
        )
        bases.check_compatible(same)
        bases.check_compatible(f.bases)

        other = ft.ApproxBases(ft.Legendre(order=2), domain, dim=3)
        g = ft.FunctionTrain.linear([1.0, 1.0, 1.0], other)
        with self.assertRaises(ft.DomainMismatch):
            f.inner(g)
        with self.assertRaises(ft.DomainMismatch):
            f * g
        return

    def test_cardinalities(self):
        bases = self.setup_bases()
        cardinalities = bases.get_cardinalities()
        self.assertTrue(torch.equal(cardinalities, torch.tensor([4, 3, 10])))
        return

    def test_broadcast(self):
        """A single basis and domain should be used for every 
        dimension.
        """

        poly = ft.Legendre(order=3)
        domain = ft.BoundedDomain(torch.tensor([0.0, 1.0]))
        bases = ft.ApproxBases(poly, domain, dim=4)

        self.assertEqual(len(bases.polys), 4)
        self.assertEqual(len(bases.domains), 4)
        self.assertIs(bases[3][0], poly)
        return

    def test_errors(self):

        polys = [ft.Legendre(order=2), ft.Legendre(order=3)]
        domain = ft.BoundedDomain()

        with self.assertRaises(ft.ShapeMismatch):
            ft.ApproxBases(polys, domain, dim=3)

        bases = self.setup_bases()
        with self.assertRaises(ft.DomainMismatch):
            bases.check_compatible(ft.ApproxBases(polys, domain, dim=2))
        
        other = ft.ApproxBases(ft.Legendre(order=2), domain, dim=3)
        with self.assertRaises(ft.DomainMismatch):
            bases.check_compatible(other)
        return


if __name__ == "__main__":
    unittest.main()
