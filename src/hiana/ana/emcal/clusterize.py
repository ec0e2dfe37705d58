"""Analysis task which rebuilds the EMCAL clusters of each event."""

from collections import defaultdict
from copy import deepcopy

from hiana.ana.base import AnaBase
from hiana.data import CaloCluster, ClusterContainer, Digit
from hiana.geo import GeoManager
from hiana.reco import (
    CalibrationDatabase,
    CalibrationError,
    ClusterUnfolder,
    RecParam,
    RecoUtils,
    clusterizer_factory,
)
from hiana.reco.calib import CALIB_DATA_PATH, GRID_CALIB_STORAGE, PEDESTAL_DATA_PATH
from hiana.utils.globals import DIGIT_HIGH_GAIN, EMCAL_CLUSTER
from hiana.utils.logger import logger

__all__ = ["ClusterizeAna"]


class ClusterizeAna(AnaBase):
    """Reclusterizes the EMCAL cells of each event.

    The cells of the event are turned into digits and clusterized with the
    algorithm requested in the reconstruction parameters, or the existing
    EMCAL clusters are simply unfolded. The new clusters are matched to the
    tracks (ESD input only) and published under a new branch of the data
    dictionary.

    Typical configuration:

    .. code-block:: yaml

        ana:
          emcal_clusterize:
            geometry: EMCAL_FIRSTYEARV1
            calib_file: calib.yaml
            rec_param:
              clusterizer: v1
              clustering_threshold: 0.1
              w0: 4.5
    """

    # Name of the analysis task (as specified in the configuration)
    name = "emcal_clusterize"

    # Set of data keys needed for this analysis task to operate
    _keys = (("event", True),)

    # Minimum fraction of a digit amplitude for a cell to be kept in a cluster
    min_cell_fraction = 0.001

    def __init__(
        self,
        geometry="EMCAL_FIRSTYEARV1",
        rec_param=None,
        ocdb_path="raw://",
        calib_file=None,
        calib_entries=None,
        load_geom_matrices=False,
        geom_matrices=None,
        just_unfold=False,
        output_branch="newEMCALClusters",
        reco_utils=None,
        write_clusters=False,
        **kwargs,
    ):
        """Initialize the clusterization task.

        Parameters
        ----------
        geometry : str, default 'EMCAL_FIRSTYEARV1'
            Name of the EMCAL geometry
        rec_param : dict, optional
            Reconstruction parameters, see :class:`RecParam`
        ocdb_path : str, default 'raw://'
            Default storage of the calibration database
        calib_file : str, optional
            YAML file which holds the calibration objects
        calib_entries : dict, optional
            Calibration objects, if not loaded from a file
        load_geom_matrices : bool, default False
            If `True`, apply the geometry matrices provided in the
            configuration rather than the ones stored in the events
        geom_matrices : Dict[int, List[List[float]]], optional
            (4, 4) Misalignment matrix of each super module
        just_unfold : bool, default False
            If `True`, unfold the existing clusters instead of reclusterizing
        output_branch : str, default 'newEMCALClusters'
            Name of the data product the new clusters are stored under
        reco_utils : dict, optional
            Track matching parameters, see :class:`RecoUtils`
        write_clusters : bool, default False
            If `True`, store the properties of the new clusters to CSV
        **kwargs : dict, optional
            Parameters to pass to :class:`AnaBase`
        """
        super().__init__(**kwargs)

        self.geometry_name = geometry
        self.geometry = None
        self.rec_param = RecParam(**(rec_param or {}))
        self.ocdb_path = ocdb_path
        self.calib_db = CalibrationDatabase(
            entries=calib_entries, file_name=calib_file, default_storage=ocdb_path
        )
        self.calib_data = None
        self.pedestal_data = None

        self.load_geom_matrices = load_geom_matrices
        self.geom_matrices = {int(k): v for k, v in (geom_matrices or {}).items()}
        self.geom_matrix_set = False

        self.just_unfold = just_unfold
        self.clusterizer = None
        self.unfolder = None
        self.reco_utils = RecoUtils(**(reco_utils or {}))

        self.output_branch = output_branch
        self.output = []
        self.run = None
        self.counters = defaultdict(int)

        self.write_clusters = write_clusters
        if self.write_clusters:
            self.initialize_writer("clusters")

    def process(self, data):
        """Rebuild the EMCAL clusters of one event.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            New clusters stored under the output branch name
        """
        # Remove the content of the output set in the previous event
        self.output = []

        event = data["event"]
        if event is None:
            logger.error("Event not available.")
            return {self.output_branch: self.output}

        self.counters["events"] += 1
        self.access_calibration(event)

        # Set the geometry matrices, once
        if not self.geom_matrix_set:
            self.set_geometry_matrices(event)

        # Unfold the existing clusters or reclusterize the cells
        if self.just_unfold:
            clusters = []
            for cluster in ClusterContainer(event.clusters, cluster_type=None).all():
                if cluster.is_emcal:
                    clusters.append(deepcopy(cluster))

            clusters = self.unfolder.unfold_clusters(clusters, event.cells)
            self.unfolder.clear()

        else:
            digits = self.cells_to_digits(event.cells)
            rec_points = self.clusterizer.digits_to_clusters(digits)
            clusters = self.rec_points_to_clusters(digits, rec_points)
            self.clusterizer.clear()

        # Recompute the track matching, only possible with ESD input
        if event.is_esd:
            self.reco_utils.find_matches(event, clusters)

        for i, cluster in enumerate(clusters):
            if event.is_esd:
                track_index = self.reco_utils.get_matched_track_index(i)
                if track_index >= 0:
                    cluster.add_track_matched(track_index)
                    logger.debug(
                        "Matched track index %d to new cluster %d", track_index, i
                    )

            cluster.id = i
            self.output.append(cluster)
            if self.write_clusters:
                self.append("clusters", **self.cluster_dict(cluster))

        self.counters["clusters"] += len(self.output)

        return {self.output_branch: self.output}

    def access_calibration(self, event):
        """Loads the calibration for the run of the event, if it changed.

        Parameters
        ----------
        event : Event
            Current event
        """
        if self.run is not None and event.run == self.run:
            return
        self.run = event.run

        self.geometry = GeoManager.get_instance(self.geometry_name)

        if self.ocdb_path:
            self.calib_db.set_default_storage(self.ocdb_path)
        self.calib_db.set_run(event.run)

        if "alien:" in self.ocdb_path:
            self.calib_db.set_specific_storage(CALIB_DATA_PATH, GRID_CALIB_STORAGE)
            self.calib_db.set_specific_storage(PEDESTAL_DATA_PATH, GRID_CALIB_STORAGE)

        if self.calib_data is None:
            self.calib_data = self.calib_db.get(CALIB_DATA_PATH)
        if self.calib_data is None:
            raise CalibrationError("Calibration parameters not found in the database.")

        if self.pedestal_data is None:
            self.pedestal_data = self.calib_db.get(PEDESTAL_DATA_PATH)
        if self.pedestal_data is None:
            raise CalibrationError("Dead map not found in the database.")

        self.init_clusterization()

    def init_clusterization(self):
        """Builds the clusterizer (or the unfolder) from the parameters."""
        if self.just_unfold:
            self.unfolder = ClusterUnfolder(
                self.rec_param.w0, self.rec_param.loc_max_cut, self.geometry
            )
            return

        self.clusterizer = clusterizer_factory(
            self.rec_param, self.geometry, self.calib_data, self.pedestal_data
        )

    def set_geometry_matrices(self, event):
        """Applies the super module misalignment matrices to the geometry.

        Parameters
        ----------
        event : Event
            First event processed
        """
        if self.load_geom_matrices:
            for sm in range(self.geometry.num_super_modules):
                if sm in self.geom_matrices:
                    self.geometry.set_misal_matrix(self.geom_matrices[sm], sm)
            self.geom_matrix_set = True
            return

        logger.info("Get geometry matrices from data.")
        if not event.is_esd:
            logger.warning("Use ideal geometry, geometry matrices not kept in AODs.")
            return

        for sm in range(self.geometry.num_super_modules):
            if sm in event.emcal_matrices:
                self.geometry.set_misal_matrix(event.emcal_matrices[sm], sm)
        self.geom_matrix_set = True

    @staticmethod
    def cells_to_digits(cells):
        """Converts the calorimeter cells into high gain digits.

        Parameters
        ----------
        cells : CaloCells
            EMCAL cells of the event

        Returns
        -------
        List[Digit]
            One digit per cell
        """
        digits = []
        for i in range(len(cells)):
            cell = cells.get_cell(i)
            if cell is None:
                break

            abs_id, amp, time = cell
            digits.append(
                Digit(
                    id=abs_id,
                    amplitude=amp,
                    time=time,
                    time_r=time,
                    index_in_list=len(digits),
                    type=DIGIT_HIGH_GAIN,
                )
            )

        return digits

    def rec_points_to_clusters(self, digits, rec_points):
        """Converts rec points into calorimeter clusters.

        The cluster energy, global position, cells and cell amplitude
        fractions are restored from the rec points.

        Parameters
        ----------
        digits : List[Digit]
            Digits the rec points were built from
        rec_points : List[RecPoint]
            Output of the clusterizer

        Returns
        -------
        List[CaloCluster]
            Calorimeter clusters
        """
        clusters = []
        for rec_point in rec_points:
            cell_ids, fractions = [], []
            for index, energy in zip(rec_point.digits_list, rec_point.energies_list):
                digit = digits[index]
                if digit.amplitude <= 0.0:
                    continue

                ratio = energy / digit.amplitude
                if ratio > self.min_cell_fraction:
                    cell_ids.append(digit.id)
                    fractions.append(ratio)

            if len(cell_ids) < 1:
                logger.warning("Skipping cluster with no cells.")
                continue

            rec_point.eval_global_position(self.rec_param.w0, digits)
            lambda0, lambda1 = rec_point.elips_axis
            clusters.append(
                CaloCluster(
                    type=EMCAL_CLUSTER,
                    energy=rec_point.energy,
                    position=rec_point.global_position,
                    cell_ids=cell_ids,
                    cell_fractions=fractions,
                    dispersion=rec_point.dispersion,
                    chi2=-1.0,
                    tof=rec_point.time,
                    n_ex_max=rec_point.n_ex_max,
                    m02=lambda0 * lambda0,
                    m20=lambda1 * lambda1,
                    dist_to_bad_channel=rec_point.dist_to_bad_tower,
                )
            )

        return clusters

    @staticmethod
    def cluster_dict(cluster):
        """Scalar summary of a cluster, as stored in the CSV output."""
        row = cluster.scalar_dict(
            [
                "id",
                "energy",
                "position",
                "dispersion",
                "tof",
                "n_ex_max",
                "m02",
                "m20",
                "dist_to_bad_channel",
            ]
        )
        row["n_cells"] = cluster.n_cells
        row["matched_track"] = (
            int(cluster.track_ids[0]) if len(cluster.track_ids) else -1
        )

        return row
